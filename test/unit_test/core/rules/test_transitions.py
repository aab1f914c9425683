"""Unit tests for order and task status transitions."""

import pytest

from cleanstation.core.errors import BusinessRuleError, PermissionDeniedError, ValidationError
from cleanstation.core.models.domain.enums import OrderStatus, TaskStatus, UserRole
from cleanstation.core.rules.transitions import (
    assignable_roles,
    can_transition,
    next_status_after_qc,
    notification_role,
    validate_order_transition,
    validate_task_transition,
)


class TestOrderTransitions:
    """Tests for the role based order transition table."""

    @pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.PRODUCTION_COORDINATOR])
    def test_unrestricted_roles(self, role):
        """Admins and coordinators may move an order anywhere."""
        assert can_transition(role, OrderStatus.ORDER_CREATED, OrderStatus.SHIPPED)

    @pytest.mark.parametrize(
        "role,current,new",
        [
            (UserRole.PROCUREMENT_SPECIALIST, OrderStatus.ORDER_CREATED, OrderStatus.PARTS_SENT_WAITING_ARRIVAL),
            (UserRole.QC_PERSON, OrderStatus.READY_FOR_PRE_QC, OrderStatus.READY_FOR_PRODUCTION),
            (UserRole.QC_PERSON, OrderStatus.READY_FOR_FINAL_QC, OrderStatus.READY_FOR_SHIP),
            (UserRole.ASSEMBLER, OrderStatus.READY_FOR_PRODUCTION, OrderStatus.TESTING_COMPLETE),
            (UserRole.ASSEMBLER, OrderStatus.TESTING_COMPLETE, OrderStatus.PACKAGING_COMPLETE),
        ],
    )
    def test_allowed_edges(self, role, current, new):
        validate_order_transition(role, current, new)

    def test_disallowed_edge(self):
        """Roles are limited to their own edges."""
        with pytest.raises(PermissionDeniedError, match="ASSEMBLER cannot transition from ORDER_CREATED to SHIPPED"):
            validate_order_transition(UserRole.ASSEMBLER, OrderStatus.ORDER_CREATED, OrderStatus.SHIPPED)

    def test_service_department_has_no_edges(self):
        assert not can_transition(
            UserRole.SERVICE_DEPARTMENT, OrderStatus.ORDER_CREATED, OrderStatus.PARTS_SENT_WAITING_ARRIVAL
        )

    def test_same_status(self):
        """Moving an order to its current status is a validation error."""
        with pytest.raises(ValidationError, match="already in READY_FOR_SHIP"):
            validate_order_transition(UserRole.ADMIN, OrderStatus.READY_FOR_SHIP, OrderStatus.READY_FOR_SHIP)

    def test_notification_roles(self):
        assert notification_role(OrderStatus.READY_FOR_PRE_QC) is UserRole.QC_PERSON
        assert notification_role(OrderStatus.READY_FOR_PRODUCTION) is UserRole.ASSEMBLER
        assert notification_role(OrderStatus.SHIPPED) is None

    @pytest.mark.parametrize(
        "order_status,expected",
        [
            (OrderStatus.ORDER_CREATED, {UserRole.PROCUREMENT_SPECIALIST}),
            (OrderStatus.READY_FOR_FINAL_QC, {UserRole.QC_PERSON}),
            (OrderStatus.PACKAGING_COMPLETE, {UserRole.ASSEMBLER}),
            (OrderStatus.SHIPPED, {UserRole.ASSEMBLER, UserRole.QC_PERSON, UserRole.PROCUREMENT_SPECIALIST}),
        ],
    )
    def test_assignable_roles(self, order_status, expected):
        assert assignable_roles(order_status) == expected


class TestTaskTransitions:
    """Tests for the task status table."""

    def test_allowed(self):
        validate_task_transition(TaskStatus.PENDING, TaskStatus.IN_PROGRESS)
        validate_task_transition(TaskStatus.COMPLETED, TaskStatus.IN_PROGRESS)

    def test_rejected_with_allowed_list(self):
        """Invalid transitions report the allowed targets."""
        with pytest.raises(BusinessRuleError) as exc_info:
            validate_task_transition(TaskStatus.PENDING, TaskStatus.COMPLETED)
        assert exc_info.value.details == {"allowed": ["BLOCKED", "CANCELLED", "IN_PROGRESS"]}
        assert exc_info.value.status_code == 422


class TestNextStatusAfterQc:
    """Tests for the order status reached by a passed QC form."""

    @pytest.mark.parametrize(
        "current,template,expected",
        [
            (OrderStatus.READY_FOR_PRE_QC, "Anything", OrderStatus.READY_FOR_PRODUCTION),
            (OrderStatus.ORDER_CREATED, "Pre-Production Check", OrderStatus.READY_FOR_PRODUCTION),
            (OrderStatus.READY_FOR_FINAL_QC, "Anything", OrderStatus.READY_FOR_SHIP),
            (OrderStatus.PACKAGING_COMPLETE, "Final Quality Check", OrderStatus.READY_FOR_SHIP),
            (OrderStatus.TESTING_COMPLETE, "End-of-Line Testing", OrderStatus.READY_FOR_FINAL_QC),
            (OrderStatus.READY_FOR_PRODUCTION, "Weld Inspection", OrderStatus.TESTING_COMPLETE),
        ],
    )
    def test_next_status(self, current, template, expected):
        assert next_status_after_qc(current, template) is expected
