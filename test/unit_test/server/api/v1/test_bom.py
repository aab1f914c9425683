import pytest
from httpx import AsyncClient

from cleanstation.core.models.domain.enums import UserRole

from ...payloads import DL27_LEG_PART, SAMPLE_CONFIGURATION

pytestmark = pytest.mark.asyncio


def _order_data(language: str = "EN", **config_overrides):
    return {
        "customer": {"language": language},
        "buildNumbers": ["B-001"],
        "configurations": {"B-001": {**SAMPLE_CONFIGURATION, **config_overrides}},
        "accessories": {"B-001": [{"assemblyId": "T2-ACC-SHELF-KIT", "quantity": 2}]},
    }


async def test_preview_bom(client: AsyncClient, auth_headers, catalog):
    """The preview holds the manual kit first and expands kits into their parts."""
    response = await client.post(
        "/api/bom/generate", json=_order_data("FR"), headers=auth_headers[UserRole.PRODUCTION_COORDINATOR]
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["hierarchical"][0]["id"] == "T2-STD-MANUAL-FR-KIT"
    assert data["total_items"] == len(data["flattened"])
    assert data["top_level_items"] == len(data["hierarchical"])

    top_ids = [line["id"] for line in data["hierarchical"]]
    assert "T2-BODY-48-60-HA" in top_ids
    assert "T2-CTRL-EDR1-ESK1" in top_ids

    leg = next(line for line in data["flattened"] if line["id"] == DL27_LEG_PART)
    assert leg["quantity"] == 4
    assert leg["indent_level"] == 1
    assert leg["is_child"] is True

    shelf = next(line for line in data["hierarchical"] if line["id"] == "T2-ACC-SHELF-KIT")
    assert shelf["quantity"] == 2
    assert shelf["category"] == "ACCESSORY"


async def test_preview_bom_short_sink(client: AsyncClient, auth_headers, catalog):
    response = await client.post(
        "/api/bom/generate", json=_order_data(length=40), headers=auth_headers[UserRole.PRODUCTION_COORDINATOR]
    )
    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "BOM_GENERATION_ERROR"
    assert "at least 48" in error["message"]


async def test_preview_bom_unknown_assembly_placeholder(client: AsyncClient, auth_headers, catalog):
    """Assemblies missing from the catalog become placeholder lines."""
    body = _order_data()
    body["accessories"] = {"B-001": [{"assemblyId": "T2-NOT-IN-CATALOG", "quantity": 1}]}
    response = await client.post("/api/bom/generate", json=body, headers=auth_headers[UserRole.ASSEMBLER])
    line = next(item for item in response.json()["data"]["hierarchical"] if item["id"] == "T2-NOT-IN-CATALOG")
    assert line["is_placeholder"] is True
    assert line["name"] == "Unknown Assembly: T2-NOT-IN-CATALOG"


async def test_preview_bom_requires_build_numbers(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/bom/generate", json={"buildNumbers": []}, headers=auth_headers[UserRole.PRODUCTION_COORDINATOR]
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
