"""Unit tests for order, history, BOM line and outsourced part repositories."""

from __future__ import annotations

from datetime import datetime

import pytest

from cleanstation.core.database.entities.orders import BomItem, OrderHistoryLog, OutsourcedPart
from cleanstation.core.models.domain.enums import OrderStatus, OutsourcedPartStatus


def _bom_line(order_id: str, position: int, item_id: str) -> BomItem:
    return BomItem(
        order_id=order_id,
        position=position,
        item_id=item_id,
        name=item_id,
        category="SYSTEM",
        item_type="KIT",
    )


@pytest.fixture
async def orders(repos, make_order):
    created = [
        make_order("PO-100", age_minutes=30, customer_name="Acme Hospital"),
        make_order("PO-200", age_minutes=20, customer_name="Northside Clinic", project_name="Dental wing"),
        make_order(
            "PO-300",
            age_minutes=10,
            customer_name="Acme Labs",
            order_status=OrderStatus.READY_FOR_PRE_QC,
        ),
    ]
    for order in created:
        await repos.orders.add(order)
    await repos.commit()
    return {order.po_number: order for order in created}


class TestOrderRepository:
    """Tests for order lookups and search."""

    async def test_get_by_po_number(self, repos, orders):
        order = await repos.orders.get_by_po_number("PO-200")
        assert order.id == orders["PO-200"].id
        assert await repos.orders.get_by_po_number("PO-999") is None

    async def test_defaults(self, repos, orders):
        order = await repos.orders.get_by_id(orders["PO-100"].id)
        assert order.order_status == OrderStatus.ORDER_CREATED
        assert order.sink_configurations == {}
        assert order.build_numbers == ["B-1"]

    async def test_search_newest_first(self, repos, orders):
        items, total = await repos.orders.search()
        assert total == 3
        assert [o.po_number for o in items] == ["PO-300", "PO-200", "PO-100"]

    async def test_search_by_status(self, repos, orders):
        items, total = await repos.orders.search(status=OrderStatus.READY_FOR_PRE_QC.value)
        assert total == 1
        assert items[0].po_number == "PO-300"

    @pytest.mark.parametrize(
        "term,expected",
        [
            ("acme", ["PO-300", "PO-100"]),
            ("po-2", ["PO-200"]),
            ("DENTAL", ["PO-200"]),
            ("nothing", []),
        ],
    )
    async def test_search_term(self, repos, orders, term, expected):
        items, total = await repos.orders.search(search=term)
        assert [o.po_number for o in items] == expected
        assert total == len(expected)

    async def test_search_pagination(self, repos, orders):
        items, total = await repos.orders.search(page=2, limit=2)
        assert total == 3
        assert [o.po_number for o in items] == ["PO-100"]


class TestOrderHistoryRepository:
    """Tests for the order audit trail."""

    async def test_log_and_list_newest_first(self, repos, orders):
        order_id = orders["PO-100"].id
        await repos.history.add(
            OrderHistoryLog(order_id=order_id, action="ORDER_CREATED", timestamp=datetime(2026, 1, 1, 9, 0))
        )
        await repos.history.add(
            OrderHistoryLog(
                order_id=order_id,
                action="STATUS_UPDATED",
                old_status="ORDER_CREATED",
                new_status="READY_FOR_PRE_QC",
                timestamp=datetime(2026, 1, 1, 10, 0),
            )
        )
        await repos.commit()

        entries = await repos.history.list_for_order(order_id)
        assert [e.action for e in entries] == ["STATUS_UPDATED", "ORDER_CREATED"]
        assert entries[0].new_status == "READY_FOR_PRE_QC"

    async def test_log_is_not_committed(self, repos, orders):
        """log() stages the entry; rolling back discards it."""
        order_id = orders["PO-200"].id
        entry = await repos.history.log(order_id, "NOTE_ADDED", notes="Checked with customer")
        assert entry.id is not None

        await repos.session.rollback()
        assert await repos.history.list_for_order(order_id) == []

    async def test_list_is_per_order(self, repos, orders):
        await repos.history.log(orders["PO-100"].id, "ORDER_CREATED")
        await repos.commit()
        assert await repos.history.list_for_order(orders["PO-200"].id) == []


class TestBomItemRepository:
    """Tests for persisted BOM lines."""

    async def test_list_by_position(self, repos, orders):
        order_id = orders["PO-100"].id
        await repos.bom_items.replace_for_order(
            order_id, [_bom_line(order_id, 1, "T2-B1"), _bom_line(order_id, 0, "T2-BODY")]
        )
        await repos.commit()

        items = await repos.bom_items.list_for_order(order_id)
        assert [(i.position, i.item_id) for i in items] == [(0, "T2-BODY"), (1, "T2-B1")]

    async def test_replace_for_order(self, repos, orders):
        order_id = orders["PO-100"].id
        other_id = orders["PO-200"].id
        await repos.bom_items.replace_for_order(order_id, [_bom_line(order_id, 0, "OLD")])
        await repos.bom_items.replace_for_order(other_id, [_bom_line(other_id, 0, "OTHER")])
        await repos.commit()

        await repos.bom_items.replace_for_order(
            order_id, [_bom_line(order_id, 0, "NEW-A"), _bom_line(order_id, 1, "NEW-B")]
        )
        await repos.commit()

        assert [i.item_id for i in await repos.bom_items.list_for_order(order_id)] == ["NEW-A", "NEW-B"]
        assert [i.item_id for i in await repos.bom_items.list_for_order(other_id)] == ["OTHER"]

    async def test_replace_with_nothing_clears(self, repos, orders):
        order_id = orders["PO-100"].id
        await repos.bom_items.replace_for_order(order_id, [_bom_line(order_id, 0, "OLD")])
        await repos.bom_items.replace_for_order(order_id, [])
        await repos.commit()

        assert await repos.bom_items.list_for_order(order_id) == []


class TestOutsourcedPartRepository:
    """Tests for outsourced part tracking."""

    async def test_list_and_get_for_order(self, repos, orders):
        order_id = orders["PO-100"].id
        part = await repos.outsourced.add(
            OutsourcedPart(order_id=order_id, part_number="T2-DL27-KIT", part_name="DL27 legs")
        )
        await repos.commit()

        [listed] = await repos.outsourced.list_for_order(order_id)
        assert listed.status == OutsourcedPartStatus.PENDING
        assert listed.supplier == "Sink Body Manufacturer"

        assert (await repos.outsourced.get_for_order(order_id, part.id)).part_number == "T2-DL27-KIT"
        assert await repos.outsourced.get_for_order(orders["PO-200"].id, part.id) is None
