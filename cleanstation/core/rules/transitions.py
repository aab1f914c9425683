"""Status transition tables for orders and assembly tasks."""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Optional

from cleanstation.core.errors import BusinessRuleError, PermissionDeniedError, ValidationError
from cleanstation.core.models.domain.enums import OrderStatus, TaskStatus, UserRole

ORDER_STATUS_SEQUENCE: List[OrderStatus] = [
    OrderStatus.ORDER_CREATED,
    OrderStatus.PARTS_SENT_WAITING_ARRIVAL,
    OrderStatus.READY_FOR_PRE_QC,
    OrderStatus.READY_FOR_PRODUCTION,
    OrderStatus.TESTING_COMPLETE,
    OrderStatus.PACKAGING_COMPLETE,
    OrderStatus.READY_FOR_FINAL_QC,
    OrderStatus.READY_FOR_SHIP,
    OrderStatus.SHIPPED,
]

# Roles allowed to move an order anywhere.
UNRESTRICTED_ROLES: FrozenSet[UserRole] = frozenset({UserRole.ADMIN, UserRole.PRODUCTION_COORDINATOR})

ROLE_ORDER_TRANSITIONS: Dict[UserRole, Dict[OrderStatus, FrozenSet[OrderStatus]]] = {
    UserRole.PROCUREMENT_SPECIALIST: {
        OrderStatus.ORDER_CREATED: frozenset({OrderStatus.PARTS_SENT_WAITING_ARRIVAL}),
        OrderStatus.PARTS_SENT_WAITING_ARRIVAL: frozenset({OrderStatus.READY_FOR_PRE_QC}),
    },
    UserRole.QC_PERSON: {
        OrderStatus.READY_FOR_PRE_QC: frozenset({OrderStatus.READY_FOR_PRODUCTION}),
        OrderStatus.PACKAGING_COMPLETE: frozenset({OrderStatus.READY_FOR_FINAL_QC}),
        OrderStatus.READY_FOR_FINAL_QC: frozenset({OrderStatus.READY_FOR_SHIP}),
    },
    UserRole.ASSEMBLER: {
        OrderStatus.READY_FOR_PRODUCTION: frozenset({OrderStatus.TESTING_COMPLETE}),
        OrderStatus.TESTING_COMPLETE: frozenset({OrderStatus.PACKAGING_COMPLETE}),
    },
}

NOTIFICATION_ROLES: Dict[OrderStatus, UserRole] = {
    OrderStatus.READY_FOR_PRE_QC: UserRole.QC_PERSON,
    OrderStatus.READY_FOR_PRODUCTION: UserRole.ASSEMBLER,
    OrderStatus.READY_FOR_FINAL_QC: UserRole.QC_PERSON,
    OrderStatus.READY_FOR_SHIP: UserRole.PRODUCTION_COORDINATOR,
}

ASSIGNABLE_ROLES: Dict[OrderStatus, FrozenSet[UserRole]] = {
    OrderStatus.ORDER_CREATED: frozenset({UserRole.PROCUREMENT_SPECIALIST}),
    OrderStatus.PARTS_SENT_WAITING_ARRIVAL: frozenset({UserRole.PROCUREMENT_SPECIALIST}),
    OrderStatus.READY_FOR_PRE_QC: frozenset({UserRole.QC_PERSON}),
    OrderStatus.READY_FOR_FINAL_QC: frozenset({UserRole.QC_PERSON}),
    OrderStatus.READY_FOR_PRODUCTION: frozenset({UserRole.ASSEMBLER}),
    OrderStatus.TESTING_COMPLETE: frozenset({UserRole.ASSEMBLER}),
    OrderStatus.PACKAGING_COMPLETE: frozenset({UserRole.ASSEMBLER}),
}

DEFAULT_ASSIGNABLE_ROLES: FrozenSet[UserRole] = frozenset(
    {UserRole.ASSEMBLER, UserRole.QC_PERSON, UserRole.PROCUREMENT_SPECIALIST}
)

TASK_TRANSITIONS: Dict[TaskStatus, FrozenSet[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.BLOCKED, TaskStatus.CANCELLED}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.COMPLETED, TaskStatus.BLOCKED, TaskStatus.CANCELLED}),
    TaskStatus.BLOCKED: frozenset({TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.CANCELLED}),
    TaskStatus.COMPLETED: frozenset({TaskStatus.IN_PROGRESS}),
    TaskStatus.CANCELLED: frozenset({TaskStatus.PENDING}),
}


def can_transition(role: UserRole, current: OrderStatus, new: OrderStatus) -> bool:
    if role in UNRESTRICTED_ROLES:
        return True
    return new in ROLE_ORDER_TRANSITIONS.get(role, {}).get(current, frozenset())


def validate_order_transition(role: UserRole, current: OrderStatus, new: OrderStatus) -> None:
    """Check that ``role`` may move an order from ``current`` to ``new``.

    Raises:
        ValidationError: If the order is already in ``new``
        PermissionDeniedError: If the role's transition table has no such edge
    """
    if current == new:
        raise ValidationError(f"Order is already in {new.value} status")
    if not can_transition(role, current, new):
        raise PermissionDeniedError(f"{role.value} cannot transition from {current.value} to {new.value}")


def notification_role(status: OrderStatus) -> Optional[UserRole]:
    return NOTIFICATION_ROLES.get(status)


def assignable_roles(status: OrderStatus) -> FrozenSet[UserRole]:
    """Roles an order in ``status`` may be assigned to."""
    return ASSIGNABLE_ROLES.get(status, DEFAULT_ASSIGNABLE_ROLES)


def validate_task_transition(current: TaskStatus, new: TaskStatus) -> None:
    """Raise BusinessRuleError unless the task table allows ``current`` -> ``new``."""
    allowed = TASK_TRANSITIONS.get(current, frozenset())
    if new not in allowed:
        raise BusinessRuleError(
            f"Invalid status transition from {current.value} to {new.value}",
            details={"allowed": sorted(status.value for status in allowed)},
        )


def next_status_after_qc(current: OrderStatus, template_name: str) -> OrderStatus:
    """Order status reached when a QC form is submitted as PASSED.

    Args:
        current: Order status at submission time
        template_name: Name of the submitted QC form

    Returns:
        The status the order moves to
    """
    if current == OrderStatus.READY_FOR_PRE_QC or template_name == "Pre-Production Check":
        return OrderStatus.READY_FOR_PRODUCTION
    if current == OrderStatus.READY_FOR_FINAL_QC or template_name == "Final Quality Check":
        return OrderStatus.READY_FOR_SHIP
    if template_name == "End-of-Line Testing":
        return OrderStatus.READY_FOR_FINAL_QC
    return OrderStatus.TESTING_COMPLETE
