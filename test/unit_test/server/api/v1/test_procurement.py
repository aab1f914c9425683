import pytest
from httpx import AsyncClient

from cleanstation.core.models.domain.enums import UserRole

pytestmark = pytest.mark.asyncio


def _kit(number: str, **overrides):
    body = {"partNumber": number, "partName": f"{number} kit", "quantity": 1}
    body.update(overrides)
    return body


async def test_procurement_from_configuration(client: AsyncClient, auth_headers, create_order):
    """Without a stored BOM the kits come from the sink configuration."""
    order = await create_order()
    response = await client.get(
        f"/api/orders/{order['id']}/procurement", headers=auth_headers[UserRole.PROCUREMENT_SPECIALIST]
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["po_number"] == "PO-1001"
    assert data["order_status"] == "ORDER_CREATED"
    assert data["procurement_needed"] is True
    assert {(p["part_number"], p["category"], p["source"]) for p in data["legs_and_feet"]} == {
        ("T2-DL27-KIT", "LEGS", "CONFIGURATION"),
        ("T2-LEVELING-CASTOR-475", "FEET", "CONFIGURATION"),
    }
    assert data["summary"] == {"total": 2, "sent": 0, "received": 0, "pending": 2}


async def test_procurement_from_stored_bom(client: AsyncClient, auth_headers, catalog, create_order):
    order = await create_order()
    await client.post(f"/api/orders/{order['id']}/generate-bom", headers=auth_headers[UserRole.ADMIN])

    response = await client.get(f"/api/orders/{order['id']}/procurement", headers=auth_headers[UserRole.ADMIN])
    legs_and_feet = response.json()["data"]["legs_and_feet"]
    assert {p["part_number"] for p in legs_and_feet} == {"T2-DL27-KIT", "T2-LEVELING-CASTOR-475"}
    assert {p["source"] for p in legs_and_feet} == {"BOM"}


async def test_order_without_legs_or_feet(client: AsyncClient, auth_headers, create_order):
    order = await create_order(sinkConfigurations={}, accessories={})
    response = await client.get(f"/api/orders/{order['id']}/procurement", headers=auth_headers[UserRole.ADMIN])
    data = response.json()["data"]
    assert data["procurement_needed"] is False
    assert data["parts"] == []


async def test_procurement_forbidden_for_assembler(client: AsyncClient, auth_headers, create_order):
    order = await create_order()
    response = await client.get(f"/api/orders/{order['id']}/procurement", headers=auth_headers[UserRole.ASSEMBLER])
    assert response.status_code == 403


async def test_track_sent_part(client: AsyncClient, auth_headers, create_order):
    """Sending a kit records the PROCUREMENT_STARTED milestone."""
    order = await create_order()
    headers = auth_headers[UserRole.PROCUREMENT_SPECIALIST]
    response = await client.post(
        f"/api/orders/{order['id']}/outsourced-parts",
        json=_kit("T2-DL27-KIT", status="SENT", supplier="Acme Steel"),
        headers=headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["milestone"] == "PROCUREMENT_STARTED"
    assert data["part"]["supplier"] == "Acme Steel"
    assert data["part"]["status"] == "SENT"

    history = await client.get(f"/api/orders/{order['id']}/history", headers=headers)
    latest = history.json()["data"][0]
    assert (latest["action"], latest["notes"]) == ("PROCUREMENT_STARTED", "T2-DL27-KIT x1 sent")

    procurement = await client.get(f"/api/orders/{order['id']}/procurement", headers=headers)
    summary = procurement.json()["data"]["summary"]
    assert summary == {"total": 2, "sent": 1, "received": 0, "pending": 1}


async def test_track_pending_part_has_no_milestone(client: AsyncClient, auth_headers, create_order):
    order = await create_order()
    response = await client.post(
        f"/api/orders/{order['id']}/outsourced-parts",
        json=_kit("T2-SEISMIC-FEET"),
        headers=auth_headers[UserRole.ADMIN],
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["milestone"] is None
    assert data["part"]["supplier"] == "Sink Body Manufacturer"


async def test_mark_part_received(client: AsyncClient, auth_headers, create_order):
    order = await create_order()
    headers = auth_headers[UserRole.PROCUREMENT_SPECIALIST]
    created = await client.post(
        f"/api/orders/{order['id']}/outsourced-parts", json=_kit("T2-DL27-KIT", status="SENT"), headers=headers
    )
    part_id = created.json()["data"]["part"]["id"]

    response = await client.put(
        f"/api/orders/{order['id']}/outsourced-parts/{part_id}", json={"status": "RECEIVED"}, headers=headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["milestone"] == "MANUFACTURING_SCHEDULING"
    assert data["part"]["actual_return_date"] is not None

    response = await client.put(
        f"/api/orders/{order['id']}/outsourced-parts/{part_id}", json={"notes": "Checked"}, headers=headers
    )
    assert response.json()["data"]["milestone"] is None
    assert response.json()["data"]["part"]["notes"] == "Checked"


async def test_update_unknown_part(client: AsyncClient, auth_headers, create_order):
    order = await create_order()
    response = await client.put(
        f"/api/orders/{order['id']}/outsourced-parts/missing",
        json={"status": "SENT"},
        headers=auth_headers[UserRole.ADMIN],
    )
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Outsourced part missing not found"
