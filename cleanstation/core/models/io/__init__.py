"""
I/O models for API requests and responses.

These schemas define the contract between the API and its clients and are
kept separate from the database entities. Request bodies accept camelCase
or snake_case keys.

Modules:
- auth: login, session and user administration models
- catalog: parts and assemblies
- configurator: control box selection request
- orders: order intake, status, history, BOM lines and outsourced parts
- pre_qc: Pre-QC initiation and verdict
- qc: QC templates and results
- tasks: assembly tasks and notes
- service_orders: service part requests and approval
- notifications: in-app notifications
"""

from .auth import LoginRequest, LoginResponse, UserCreate, UserRead, UserUpdate
from .catalog import AssemblyCreate, AssemblyDetail, AssemblyRead, ComponentCreate, ComponentRead, PartCreate, PartRead
from .configurator import ControlBoxRequest
from .notifications import NotificationRead
from .orders import (
    BomItemRead,
    OrderAssign,
    OrderAssignment,
    OrderCreate,
    OrderHistoryRead,
    OrderRead,
    OrderStatusChanged,
    OrderStatusUpdate,
    OutsourcedPartCreate,
    OutsourcedPartRead,
    OutsourcedPartUpdate,
)
from .pre_qc import PreQcComplete, PreQcInitiate, PreQcTransition
from .qc import (
    QcItemResultIn,
    QcItemResultRead,
    QcResultDetail,
    QcResultRead,
    QcSubmission,
    QcTemplateClone,
    QcTemplateCreate,
    QcTemplateDetail,
    QcTemplateGroup,
    QcTemplateItemIn,
    QcTemplateItemRead,
    QcTemplateRead,
    QcTemplateUpdate,
    QcTemplateUsage,
)
from .service_orders import (
    ItemAdjustment,
    ServiceOrderApproval,
    ServiceOrderCreate,
    ServiceOrderItemIn,
    ServiceOrderItemRead,
    ServiceOrderRead,
)
from .tasks import TaskCreate, TaskDetail, TaskNoteCreate, TaskNoteRead, TaskRead, TaskStatusUpdate

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "UserCreate",
    "UserRead",
    "UserUpdate",
    "AssemblyCreate",
    "AssemblyDetail",
    "AssemblyRead",
    "ComponentCreate",
    "ComponentRead",
    "PartCreate",
    "PartRead",
    "ControlBoxRequest",
    "NotificationRead",
    "BomItemRead",
    "OrderAssign",
    "OrderAssignment",
    "OrderCreate",
    "OrderHistoryRead",
    "OrderRead",
    "OrderStatusChanged",
    "OrderStatusUpdate",
    "OutsourcedPartCreate",
    "OutsourcedPartRead",
    "OutsourcedPartUpdate",
    "PreQcComplete",
    "PreQcInitiate",
    "PreQcTransition",
    "QcItemResultIn",
    "QcItemResultRead",
    "QcResultDetail",
    "QcResultRead",
    "QcSubmission",
    "QcTemplateClone",
    "QcTemplateCreate",
    "QcTemplateDetail",
    "QcTemplateGroup",
    "QcTemplateItemIn",
    "QcTemplateItemRead",
    "QcTemplateRead",
    "QcTemplateUpdate",
    "QcTemplateUsage",
    "ItemAdjustment",
    "ServiceOrderApproval",
    "ServiceOrderCreate",
    "ServiceOrderItemIn",
    "ServiceOrderItemRead",
    "ServiceOrderRead",
    "TaskCreate",
    "TaskDetail",
    "TaskNoteCreate",
    "TaskNoteRead",
    "TaskRead",
    "TaskStatusUpdate",
]
