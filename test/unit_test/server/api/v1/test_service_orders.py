import pytest
from httpx import AsyncClient

from cleanstation.core.models.domain.enums import UserRole

pytestmark = pytest.mark.asyncio

SERVICE_ORDERS_URL = "/api/service-orders"


@pytest.fixture
def request_parts(client: AsyncClient, auth_headers):
    async def _request(*items, role: UserRole = UserRole.SERVICE_DEPARTMENT, notes=None):
        body = {"notes": notes, "items": [{"partId": part_id, "quantityRequested": qty} for part_id, qty in items]}
        response = await client.post(SERVICE_ORDERS_URL, json=body, headers=auth_headers[role])
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _request


async def test_create_service_order(users, catalog, request_parts):
    order = await request_parts(("SVC-FILTER-01", 3), ("SVC-VALVE-02", 1), notes="Clinic B")
    assert order["status"] == "PENDING_APPROVAL"
    assert order["requested_by_id"] == users[UserRole.SERVICE_DEPARTMENT].id
    assert order["notes"] == "Clinic B"
    assert [(i["part_id"], i["quantity_requested"], i["quantity_approved"]) for i in order["items"]] == [
        ("SVC-FILTER-01", 3, None),
        ("SVC-VALVE-02", 1, None),
    ]


async def test_create_with_unknown_parts(client: AsyncClient, auth_headers, catalog):
    response = await client.post(
        SERVICE_ORDERS_URL,
        json={"items": [{"partId": "NOPE-2", "quantityRequested": 1}, {"partId": "NOPE-1", "quantityRequested": 1}]},
        headers=auth_headers[UserRole.SERVICE_DEPARTMENT],
    )
    assert response.status_code == 422
    assert response.json()["error"]["details"] == {"missing_part_ids": ["NOPE-1", "NOPE-2"]}


@pytest.mark.parametrize("items", [[], [{"partId": "SVC-FILTER-01", "quantityRequested": 0}]])
async def test_create_validation(client: AsyncClient, auth_headers, catalog, items):
    response = await client.post(
        SERVICE_ORDERS_URL, json={"items": items}, headers=auth_headers[UserRole.SERVICE_DEPARTMENT]
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_create_forbidden_for_assembler(client: AsyncClient, auth_headers, catalog):
    response = await client.post(
        SERVICE_ORDERS_URL,
        json={"items": [{"partId": "SVC-FILTER-01", "quantityRequested": 1}]},
        headers=auth_headers[UserRole.ASSEMBLER],
    )
    assert response.status_code == 403


async def test_service_department_sees_own_requests(client: AsyncClient, auth_headers, catalog, request_parts):
    own = await request_parts(("SVC-FILTER-01", 1))
    await request_parts(("SVC-VALVE-02", 1), role=UserRole.ADMIN)

    response = await client.get(SERVICE_ORDERS_URL, headers=auth_headers[UserRole.SERVICE_DEPARTMENT])
    assert [o["id"] for o in response.json()["data"]] == [own["id"]]

    response = await client.get(SERVICE_ORDERS_URL, headers=auth_headers[UserRole.PROCUREMENT_SPECIALIST])
    assert response.json()["metadata"]["pagination"]["total"] == 2


async def test_production_roles_only_see_approved(client: AsyncClient, auth_headers, catalog, request_parts):
    """Pending requests stay hidden from production until approved."""
    order = await request_parts(("SVC-FILTER-01", 2))

    response = await client.get(SERVICE_ORDERS_URL, headers=auth_headers[UserRole.ASSEMBLER])
    assert response.json()["data"] == []
    response = await client.get(f"{SERVICE_ORDERS_URL}/{order['id']}", headers=auth_headers[UserRole.QC_PERSON])
    assert response.status_code == 403

    approval = await client.post(
        f"/api/v1/service/orders/{order['id']}/approve",
        json={"action": "APPROVE"},
        headers=auth_headers[UserRole.PROCUREMENT_SPECIALIST],
    )
    assert approval.status_code == 200

    response = await client.get(SERVICE_ORDERS_URL, headers=auth_headers[UserRole.ASSEMBLER])
    assert [o["id"] for o in response.json()["data"]] == [order["id"]]
    response = await client.get(
        SERVICE_ORDERS_URL, params={"status": "PENDING_APPROVAL"}, headers=auth_headers[UserRole.ASSEMBLER]
    )
    assert response.json()["data"] == []
    response = await client.get(f"{SERVICE_ORDERS_URL}/{order['id']}", headers=auth_headers[UserRole.QC_PERSON])
    assert response.status_code == 200


async def test_get_unknown_service_order(client: AsyncClient, auth_headers):
    response = await client.get(f"{SERVICE_ORDERS_URL}/missing", headers=auth_headers[UserRole.ADMIN])
    assert response.status_code == 404
