import pytest
from httpx import AsyncClient

from cleanstation.core.models.domain.enums import OrderStatus, UserRole

pytestmark = pytest.mark.asyncio


async def _final_template(client: AsyncClient, order_id: str, headers):
    response = await client.get(f"/api/orders/{order_id}/qc/template", headers=headers)
    assert response.status_code == 200
    return response.json()["data"]


async def test_template_for_default_family(client: AsyncClient, auth_headers, qc_templates, create_order):
    order = await create_order()
    template = await _final_template(client, order["id"], auth_headers[UserRole.QC_PERSON])
    assert template["id"] == qc_templates["final"].id
    assert template["item_count"] == 2
    assert [item["checklist_item"] for item in template["items"]] == [
        "Surfaces free of scratches",
        "Serial number recorded",
    ]


async def test_template_falls_back_to_generic(client: AsyncClient, auth_headers, qc_templates, create_order):
    order = await create_order()
    response = await client.get(
        f"/api/orders/{order['id']}/qc/template",
        params={"productFamily": "MDRD_T3_SINK"},
        headers=auth_headers[UserRole.QC_PERSON],
    )
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Generic Inspection"


async def test_template_missing(client: AsyncClient, auth_headers, create_order):
    order = await create_order()
    response = await client.get(f"/api/orders/{order['id']}/qc/template", headers=auth_headers[UserRole.QC_PERSON])
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "QC template MDRD_T2_SINK not found"


async def test_submit_passed_final_qc(client: AsyncClient, auth_headers, qc_templates, create_order, set_order_status):
    """A passed final QC form ships the order and tells the coordinators."""
    order = await create_order()
    await set_order_status(order["id"], OrderStatus.READY_FOR_FINAL_QC)
    headers = auth_headers[UserRole.QC_PERSON]
    template = await _final_template(client, order["id"], headers)

    response = await client.post(
        f"/api/orders/{order['id']}/qc",
        json={
            "templateId": template["id"],
            "overallStatus": "PASSED",
            "buildNumber": "B-001",
            "items": [
                {"templateItemId": template["items"][0]["id"], "isConforming": True},
                {"templateItemId": template["items"][1]["id"], "resultValue": "SN-42"},
            ],
        },
        headers=headers,
    )
    assert response.status_code == 201
    result = response.json()["data"]
    assert result["overall_status"] == "PASSED"
    assert result["build_number"] == "B-001"
    assert sorted(item["result_value"] or "" for item in result["items"]) == ["", "SN-42"]

    refreshed = await client.get(f"/api/orders/{order['id']}", headers=headers)
    assert refreshed.json()["data"]["order_status"] == "READY_FOR_SHIP"

    history = await client.get(f"/api/orders/{order['id']}/history", headers=headers)
    latest = history.json()["data"][0]
    assert latest["action"] == "QC_COMPLETED"
    assert latest["notes"] == "Final Quality Check submitted as PASSED"

    notifications = await client.get("/api/v1/notifications", headers=auth_headers[UserRole.PRODUCTION_COORDINATOR])
    assert len(notifications.json()["data"]) == 1


async def test_resubmission_replaces_result(client: AsyncClient, auth_headers, qc_templates, create_order):
    order = await create_order()
    headers = auth_headers[UserRole.QC_PERSON]
    template = await _final_template(client, order["id"], headers)
    item_id = template["items"][0]["id"]

    for status, conforming in (("FAILED", False), ("REQUIRES_REVIEW", True)):
        response = await client.post(
            f"/api/orders/{order['id']}/qc",
            json={
                "templateId": template["id"],
                "overallStatus": status,
                "items": [{"templateItemId": item_id, "isConforming": conforming}],
            },
            headers=headers,
        )
        assert response.status_code == 201

    results = await client.get(f"/api/orders/{order['id']}/qc", headers=headers)
    [result] = results.json()["data"]
    assert result["overall_status"] == "REQUIRES_REVIEW"
    assert [item["is_conforming"] for item in result["items"]] == [True]

    refreshed = await client.get(f"/api/orders/{order['id']}", headers=headers)
    assert refreshed.json()["data"]["order_status"] == "ORDER_CREATED"

    history = await client.get(f"/api/orders/{order['id']}/history", headers=headers)
    assert [e["action"] for e in history.json()["data"]].count("QC_SUBMITTED") == 2


async def test_submit_with_foreign_item(client: AsyncClient, auth_headers, qc_templates, create_order):
    order = await create_order()
    generic_item = (
        await client.get(
            f"/api/admin/qc-templates/{qc_templates['generic'].id}", headers=auth_headers[UserRole.QC_PERSON]
        )
    ).json()["data"]["items"][0]["id"]

    response = await client.post(
        f"/api/orders/{order['id']}/qc",
        json={
            "templateId": qc_templates["final"].id,
            "overallStatus": "PASSED",
            "items": [{"templateItemId": generic_item}],
        },
        headers=auth_headers[UserRole.QC_PERSON],
    )
    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"template_item_ids": [generic_item]}


async def test_submit_unknown_template(client: AsyncClient, auth_headers, create_order):
    order = await create_order()
    response = await client.post(
        f"/api/orders/{order['id']}/qc",
        json={"templateId": "nope", "overallStatus": "PASSED"},
        headers=auth_headers[UserRole.QC_PERSON],
    )
    assert response.status_code == 404


async def test_submit_forbidden_for_assembler(client: AsyncClient, auth_headers, qc_templates, create_order):
    order = await create_order()
    response = await client.post(
        f"/api/orders/{order['id']}/qc",
        json={"templateId": qc_templates["final"].id, "overallStatus": "PASSED"},
        headers=auth_headers[UserRole.ASSEMBLER],
    )
    assert response.status_code == 403
