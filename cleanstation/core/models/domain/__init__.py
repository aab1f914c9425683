"""Domain enums and sink configuration models shared by entities, rules and API schemas."""

from .configuration import (
    AccessoryItem,
    BasinConfiguration,
    CustomerInfo,
    FaucetConfiguration,
    OrderData,
    SinkConfiguration,
    SprayerConfiguration,
)
from .enums import (
    AssemblyType,
    BasinKind,
    Language,
    NotificationType,
    OrderStatus,
    OutsourcedPartStatus,
    PartStatus,
    PartType,
    QcItemType,
    QcStatus,
    ServiceOrderAction,
    ServiceOrderStatus,
    TaskPriority,
    TaskStatus,
    UserRole,
)

__all__ = [
    "AccessoryItem",
    "BasinConfiguration",
    "CustomerInfo",
    "FaucetConfiguration",
    "OrderData",
    "SinkConfiguration",
    "SprayerConfiguration",
    "AssemblyType",
    "BasinKind",
    "Language",
    "NotificationType",
    "OrderStatus",
    "OutsourcedPartStatus",
    "PartStatus",
    "PartType",
    "QcItemType",
    "QcStatus",
    "ServiceOrderAction",
    "ServiceOrderStatus",
    "TaskPriority",
    "TaskStatus",
    "UserRole",
]
