"""Domain enums for CleanStation models."""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """
    Roles a user can hold.

    Every route checks the caller's role before touching the database.
    """

    ADMIN = "ADMIN"
    PRODUCTION_COORDINATOR = "PRODUCTION_COORDINATOR"
    QC_PERSON = "QC_PERSON"
    ASSEMBLER = "ASSEMBLER"
    PROCUREMENT_SPECIALIST = "PROCUREMENT_SPECIALIST"
    SERVICE_DEPARTMENT = "SERVICE_DEPARTMENT"


class OrderStatus(str, Enum):
    """Lifecycle status of a production order, in workflow order."""

    ORDER_CREATED = "ORDER_CREATED"
    PARTS_SENT_WAITING_ARRIVAL = "PARTS_SENT_WAITING_ARRIVAL"  # Legs/feet out at the body manufacturer.
    READY_FOR_PRE_QC = "READY_FOR_PRE_QC"
    READY_FOR_PRODUCTION = "READY_FOR_PRODUCTION"
    TESTING_COMPLETE = "TESTING_COMPLETE"
    PACKAGING_COMPLETE = "PACKAGING_COMPLETE"
    READY_FOR_FINAL_QC = "READY_FOR_FINAL_QC"
    READY_FOR_SHIP = "READY_FOR_SHIP"
    SHIPPED = "SHIPPED"
    ASSEMBLY_REJECTED_PRE_QC = "ASSEMBLY_REJECTED_PRE_QC"  # Pre-QC failed and needs rework.


class Language(str, Enum):
    """Language of the printed manual shipped with the sink."""

    EN = "EN"
    FR = "FR"
    ES = "ES"


class PartType(str, Enum):
    COMPONENT = "COMPONENT"
    MATERIAL = "MATERIAL"
    CUSTOM_PART_AUTOGEN = "CUSTOM_PART_AUTOGEN"  # Generated for custom basin/pegboard sizes.


class PartStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class AssemblyType(str, Enum):
    SIMPLE = "SIMPLE"
    COMPLEX = "COMPLEX"
    SERVICE_PART = "SERVICE_PART"
    KIT = "KIT"


class BasinKind(str, Enum):
    """Electronic basin variants; they decide which control box is needed."""

    E_DRAIN = "E_DRAIN"
    E_SINK = "E_SINK"
    E_SINK_DI = "E_SINK_DI"  # Deionised water; counts as an E-Sink for the control box.


class QcItemType(str, Enum):
    PASS_FAIL = "PASS_FAIL"
    TEXT_INPUT = "TEXT_INPUT"
    NUMERIC_INPUT = "NUMERIC_INPUT"
    SINGLE_SELECT = "SINGLE_SELECT"
    MULTI_SELECT = "MULTI_SELECT"
    DATE_INPUT = "DATE_INPUT"
    CHECKBOX = "CHECKBOX"


class QcStatus(str, Enum):
    """Overall outcome of a QC form submission."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    PASSED = "PASSED"
    FAILED = "FAILED"
    REQUIRES_REVIEW = "REQUIRES_REVIEW"


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    BLOCKED = "BLOCKED"
    CANCELLED = "CANCELLED"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class ServiceOrderStatus(str, Enum):
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    ORDERED = "ORDERED"
    RECEIVED = "RECEIVED"


class ServiceOrderAction(str, Enum):
    """Decisions available to the approver of a service order."""

    APPROVE = "APPROVE"
    REJECT = "REJECT"
    REQUEST_MODIFICATION = "REQUEST_MODIFICATION"


class OutsourcedPartStatus(str, Enum):
    PENDING = "PENDING"
    SENT = "SENT"
    IN_PROGRESS = "IN_PROGRESS"
    RECEIVED = "RECEIVED"
    CANCELLED = "CANCELLED"


class NotificationType(str, Enum):
    ORDER_STATUS_CHANGE = "ORDER_STATUS_CHANGE"
    TASK_ASSIGNMENT = "TASK_ASSIGNMENT"
    QC_APPROVAL_REQUIRED = "QC_APPROVAL_REQUIRED"
    SERVICE_ORDER_UPDATE = "SERVICE_ORDER_UPDATE"
