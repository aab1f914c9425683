"""Initial schema and catalog seed data for CleanStation

Revision ID: 20260601_000000
Revises: None
Create Date: 2026-06-01 00:00:00.000000

This is the initial migration that creates all tables of the workflow service
and seeds the data the rule tables depend on:
- Users and login sessions
- Parts, assemblies and assembly components
- Orders, history log, persisted BOM lines and outsourced parts
- QC form templates, items and results
- Assembly tasks, service orders and notifications
- Catalog kits and parts referenced by catalog_rules.json
- Default QC form templates
- An initial administrator when CLEANSTATION_ADMIN_PASSWORD is set

Revision format: YYYYMMDD_HHMMSS_description

"""

import os
from datetime import datetime, timezone
from typing import Sequence, Union
from uuid import uuid4

import sqlalchemy as sa
from werkzeug.security import generate_password_hash

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260601_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_ROLE = sa.Enum(
    "ADMIN",
    "PRODUCTION_COORDINATOR",
    "QC_PERSON",
    "ASSEMBLER",
    "PROCUREMENT_SPECIALIST",
    "SERVICE_DEPARTMENT",
    name="userrole",
)
ORDER_STATUS = sa.Enum(
    "ORDER_CREATED",
    "PARTS_SENT_WAITING_ARRIVAL",
    "READY_FOR_PRE_QC",
    "READY_FOR_PRODUCTION",
    "TESTING_COMPLETE",
    "PACKAGING_COMPLETE",
    "READY_FOR_FINAL_QC",
    "READY_FOR_SHIP",
    "SHIPPED",
    "ASSEMBLY_REJECTED_PRE_QC",
    name="orderstatus",
)
LANGUAGE = sa.Enum("EN", "FR", "ES", name="language")
PART_TYPE = sa.Enum("COMPONENT", "MATERIAL", "CUSTOM_PART_AUTOGEN", name="parttype")
PART_STATUS = sa.Enum("ACTIVE", "INACTIVE", name="partstatus")
ASSEMBLY_TYPE = sa.Enum("SIMPLE", "COMPLEX", "SERVICE_PART", "KIT", name="assemblytype")
QC_ITEM_TYPE = sa.Enum(
    "PASS_FAIL",
    "TEXT_INPUT",
    "NUMERIC_INPUT",
    "SINGLE_SELECT",
    "MULTI_SELECT",
    "DATE_INPUT",
    "CHECKBOX",
    name="qcitemtype",
)
QC_STATUS = sa.Enum("NOT_STARTED", "IN_PROGRESS", "PASSED", "FAILED", "REQUIRES_REVIEW", name="qcstatus")
TASK_STATUS = sa.Enum("PENDING", "IN_PROGRESS", "COMPLETED", "BLOCKED", "CANCELLED", name="taskstatus")
TASK_PRIORITY = sa.Enum("LOW", "MEDIUM", "HIGH", "URGENT", name="taskpriority")
SERVICE_ORDER_STATUS = sa.Enum(
    "PENDING_APPROVAL", "APPROVED", "REJECTED", "ORDERED", "RECEIVED", name="serviceorderstatus"
)
OUTSOURCED_PART_STATUS = sa.Enum(
    "PENDING", "SENT", "IN_PROGRESS", "RECEIVED", "CANCELLED", name="outsourcedpartstatus"
)
NOTIFICATION_TYPE = sa.Enum(
    "ORDER_STATUS_CHANGE",
    "TASK_ASSIGNMENT",
    "QC_APPROVAL_REQUIRED",
    "SERVICE_ORDER_UPDATE",
    name="notificationtype",
)

ENUM_TYPES = [
    USER_ROLE,
    ORDER_STATUS,
    LANGUAGE,
    PART_TYPE,
    PART_STATUS,
    ASSEMBLY_TYPE,
    QC_ITEM_TYPE,
    QC_STATUS,
    TASK_STATUS,
    TASK_PRIORITY,
    SERVICE_ORDER_STATUS,
    OUTSOURCED_PART_STATUS,
    NOTIFICATION_TYPE,
]

# Catalog seed. Kit ids must match cleanstation/core/rules/data/catalog_rules.json.
LEG_KITS = {
    "T2-DL27-KIT": "DL27 Height Adjustable Legs Kit",
    "T2-DL14-KIT": "DL14 Height Adjustable Legs Kit",
    "T2-LC1-KIT": "LC1 Height Adjustable Legs Kit",
    "T2-DL27-FH-KIT": "DL27 Fixed Height Legs Kit",
    "T2-DL14-FH-KIT": "DL14 Fixed Height Legs Kit",
    "T2-LC1-FH-KIT": "LC1 Fixed Height Legs Kit",
}
FEET_KITS = {
    "T2-LEVELING-CASTOR-475": "Leveling Casters Kit",
    "T2-SEISMIC-FEET": "Seismic Feet Kit",
}
SINK_BODIES = {
    "T2-BODY-48-60-HA": "Sink Body 48-60in, Height Adjustable",
    "T2-BODY-61-72-HA": "Sink Body 61-72in, Height Adjustable",
    "T2-BODY-73-120-HA": "Sink Body 73-120in, Height Adjustable",
}
BASIN_KITS = {
    "T2-BSN-EDR-KIT": "E-Drain Basin Kit",
    "T2-BSN-ESK-KIT": "E-Sink Basin Kit",
    "T2-BSN-ESK-DI-KIT": "E-Sink DI Basin Kit",
}
BASIN_SIZES = {
    "ASSY-T2-ADW-BASIN20X20X8": "Basin 20x20x8",
    "ASSY-T2-ADW-BASIN24X20X8": "Basin 24x20x8",
    "ASSY-T2-ADW-BASIN24X20X10": "Basin 24x20x10",
    "ASSY-T2-ADW-BASIN30X20X8": "Basin 30x20x8",
    "ASSY-T2-ADW-BASIN30X20X10": "Basin 30x20x10",
}
ACCESSORY_KITS = {
    "T2-OA-MS-1026": "P-Trap Disinfection Drain Unit",
    "T2-OA-BASIN-LIGHT-EDR-KIT": "Basin Light (E-Drain Kit)",
    "T2-OA-BASIN-LIGHT-ESK-KIT": "Basin Light (E-Sink Kit)",
    "T2-OA-STD-FAUCET-WB-KIT": "Standard Wrist Blade Faucet Kit",
    "T2-OA-PRE-RINSE-FAUCET-KIT": "Pre-Rinse Spray Faucet Kit",
    "T2-OA-DI-GOOSENECK-FAUCET-KIT": "DI Gooseneck Faucet Kit",
    "T2-OA-WATERGUN-ROSETTE-KIT": "Water Gun Kit (Rosette Mount)",
    "T2-OA-WATERGUN-TURRET-KIT": "Water Gun Kit (Turret Mount)",
    "T2-OA-AIRGUN-ROSETTE-KIT": "Air Gun Kit (Rosette Mount)",
    "T2-OA-AIRGUN-TURRET-KIT": "Air Gun Kit (Turret Mount)",
    "T2-OHL-MDRD-KIT": "Overhead Light Kit, MDRD",
    "T-OA-PB-COLOR": "Pegboard Color Option",
    "T2-ADW-PB-PERF-KIT": "Perforated Pegboard Kit",
    "T2-ADW-PB-SOLID-KIT": "Solid Pegboard Kit",
    "T2-STD-MANUAL-EN-KIT": "Standard Manual Kit, English",
    "T2-STD-MANUAL-FR-KIT": "Standard Manual Kit, French",
    "T2-STD-MANUAL-SP-KIT": "Standard Manual Kit, Spanish",
}
PEGBOARD_SIZES = ["3436", "4836", "6036", "7236", "8436", "9636", "10836", "12036"]
PEGBOARD_TYPES = {"PERF": "Perforated", "SOLID": "Solid"}
PEGBOARD_COLORS = ["GREEN", "BLACK", "YELLOW", "GREY", "RED", "BLUE", "ORANGE", "WHITE"]
CONTROL_BOXES = {
    "T2-CTRL-EDR1": (1, 0, "719.176"),
    "T2-CTRL-ESK1": (0, 1, "719.177"),
    "T2-CTRL-EDR1-ESK1": (1, 1, "719.178"),
    "T2-CTRL-EDR2": (2, 0, "719.179"),
    "T2-CTRL-ESK2": (0, 2, "719.180"),
    "T2-CTRL-EDR3": (3, 0, "719.181"),
    "T2-CTRL-ESK3": (0, 3, "719.182"),
    "T2-CTRL-EDR1-ESK2": (1, 2, "719.183"),
    "T2-CTRL-EDR2-ESK1": (2, 1, "719.184"),
}
CONTROL_BOX_PARTS = {
    "T2-RFK-BRD-MNT": "Board Mounting Rail Kit",
    "T2-CTRL-RK3-SHELL": "Control Box Shell, RK3",
    "PW-105R3-06": "Power Cord",
    "LRS-100-24": "Power Supply 24V 100W",
    "T2-EDRAIN-BOARD-R3": "E-Drain Controller Board R3",
    "T-ESOM-F4-01-EDR": "E-Drain System-on-Module",
    "T2-ESINK-BOARD-R3": "E-Sink Controller Board R3",
    "T-ESOM-F4-01-ESK": "E-Sink System-on-Module",
    "52-67001-7": "Board Harness",
    "DC11.0031.201": "Board Connector",
    "T4072014031-001": "Board Standoff Set",
    "T2-UPG-CTRL-BOX-BRKT": "Control Box Upgrade Bracket",
}
BASE_PARTS = ["T2-RFK-BRD-MNT", "T2-CTRL-RK3-SHELL", "PW-105R3-06", "LRS-100-24"]
PER_E_DRAIN_PARTS = ["T2-EDRAIN-BOARD-R3", "T-ESOM-F4-01-EDR"]
PER_E_SINK_PARTS = ["T2-ESINK-BOARD-R3", "T-ESOM-F4-01-ESK"]
PER_BOARD_PARTS = ["52-67001-7", "DC11.0031.201", "T4072014031-001"]

QC_TEMPLATES = [
    (
        "Pre-Production Check",
        "PRE_QC",
        [
            ("Job Information", "Job ID Number verified", "TEXT_INPUT"),
            ("Structural Components", "Legs or feet installed and functional", "PASS_FAIL"),
            ("Mounting & Holes", "All mounting holes match drawing specifications", "PASS_FAIL"),
            ("Basin Inspection", "Basin dimensions verified", "PASS_FAIL"),
        ],
    ),
    (
        "End-of-Line Testing",
        "TESTING",
        [
            ("Electrical", "Control box powers on and all basins respond", "PASS_FAIL"),
            ("Plumbing", "No leaks at drains and faucets under full flow", "PASS_FAIL"),
            ("Lifter", "Height adjustment travels full range", "PASS_FAIL"),
        ],
    ),
    (
        "Final Quality Check",
        "FINAL_QC",
        [
            ("Finish", "Surfaces free of scratches and weld discoloration", "PASS_FAIL"),
            ("Documentation", "Manual kit included in the correct language", "PASS_FAIL"),
            ("Packaging", "Accessories packed and labelled per build number", "PASS_FAIL"),
        ],
    ),
]


def _timestamps():
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return {"created_at": now, "updated_at": now}


def upgrade() -> None:
    """Create all tables and seed initial data."""

    # Create cs_users table
    op.create_table(
        "cs_users",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("initials", sa.String(8), nullable=False),
        sa.Column("role", USER_ROLE, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.Index("ix_cs_users_username", "username", unique=True),
    )

    # Create cs_user_sessions table
    op.create_table(
        "cs_user_sessions",
        sa.Column("token", sa.String(128), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("cs_users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("token"),
        sa.Index("ix_cs_user_sessions_user_id", "user_id"),
        sa.Index("ix_cs_user_sessions_expires_at", "expires_at"),
    )

    # Create cs_parts table
    op.create_table(
        "cs_parts",
        sa.Column("part_id", sa.String(128), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("manufacturer_part_number", sa.String(128), nullable=True),
        sa.Column("manufacturer_name", sa.String(128), nullable=True),
        sa.Column("type", PART_TYPE, nullable=False),
        sa.Column("status", PART_STATUS, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("part_id"),
        sa.Index("ix_cs_parts_status", "status"),
    )

    # Create cs_assemblies table
    op.create_table(
        "cs_assemblies",
        sa.Column("assembly_id", sa.String(128), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", ASSEMBLY_TYPE, nullable=False),
        sa.Column("category_code", sa.String(32), nullable=True),
        sa.Column("subcategory_code", sa.String(32), nullable=True),
        sa.Column("can_order", sa.Boolean(), nullable=False),
        sa.Column("is_kit", sa.Boolean(), nullable=False),
        sa.Column("status", PART_STATUS, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("assembly_id"),
        sa.Index("ix_cs_assemblies_category_code", "category_code"),
    )

    # Create cs_assembly_components table
    op.create_table(
        "cs_assembly_components",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("parent_assembly_id", sa.String(128), sa.ForeignKey("cs_assemblies.assembly_id"), nullable=False),
        sa.Column("child_part_id", sa.String(128), sa.ForeignKey("cs_parts.part_id"), nullable=True),
        sa.Column("child_assembly_id", sa.String(128), sa.ForeignKey("cs_assemblies.assembly_id"), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_cs_assembly_components_parent_assembly_id", "parent_assembly_id"),
    )

    # Create cs_orders table
    op.create_table(
        "cs_orders",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("po_number", sa.String(64), nullable=False),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("project_name", sa.String(255), nullable=True),
        sa.Column("sales_person", sa.String(255), nullable=False),
        sa.Column("want_date", sa.DateTime(), nullable=False),
        sa.Column("language", LANGUAGE, nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("build_numbers", sa.JSON(), nullable=False),
        sa.Column("sink_configurations", sa.JSON(), nullable=False),
        sa.Column("accessories", sa.JSON(), nullable=False),
        sa.Column("order_status", ORDER_STATUS, nullable=False),
        sa.Column("current_assignee", sa.String(64), nullable=True),
        sa.Column("created_by_id", sa.String(64), sa.ForeignKey("cs_users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_cs_orders_po_number", "po_number", unique=True),
        sa.Index("ix_cs_orders_order_status", "order_status"),
        sa.Index("ix_cs_orders_created_at", "created_at"),
    )

    # Create cs_order_history_logs table
    op.create_table(
        "cs_order_history_logs",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("order_id", sa.String(64), sa.ForeignKey("cs_orders.id"), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("cs_users.id"), nullable=True),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("old_status", sa.String(64), nullable=True),
        sa.Column("new_status", sa.String(64), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_cs_order_history_logs_order_id", "order_id"),
        sa.Index("ix_cs_order_history_logs_timestamp", "timestamp"),
    )

    # Create cs_bom_items table
    op.create_table(
        "cs_bom_items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("order_id", sa.String(64), sa.ForeignKey("cs_orders.id"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("build_number", sa.String(64), nullable=True),
        sa.Column("item_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("item_type", sa.String(64), nullable=False),
        sa.Column("indent_level", sa.Integer(), nullable=False),
        sa.Column("is_custom", sa.Boolean(), nullable=False),
        sa.Column("is_placeholder", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_cs_bom_items_order_id", "order_id"),
    )

    # Create cs_outsourced_parts table
    op.create_table(
        "cs_outsourced_parts",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("order_id", sa.String(64), sa.ForeignKey("cs_orders.id"), nullable=False),
        sa.Column("part_number", sa.String(128), nullable=False),
        sa.Column("part_name", sa.String(255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("supplier", sa.String(255), nullable=False),
        sa.Column("status", OUTSOURCED_PART_STATUS, nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("expected_return_date", sa.DateTime(), nullable=True),
        sa.Column("actual_return_date", sa.DateTime(), nullable=True),
        sa.Column("marked_by_id", sa.String(64), sa.ForeignKey("cs_users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_cs_outsourced_parts_order_id", "order_id"),
    )

    # Create cs_qc_form_templates table
    op.create_table(
        "cs_qc_form_templates",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("form_type", sa.String(64), nullable=True),
        sa.Column("version", sa.String(32), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("applies_to_product_family", sa.String(64), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_cs_qc_form_templates_name", "name"),
        sa.Index("ix_cs_qc_form_templates_applies_to_product_family", "applies_to_product_family"),
    )

    # Create cs_qc_form_template_items table
    op.create_table(
        "cs_qc_form_template_items",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("template_id", sa.String(64), sa.ForeignKey("cs_qc_form_templates.id"), nullable=False),
        sa.Column("section", sa.String(128), nullable=False),
        sa.Column("checklist_item", sa.Text(), nullable=False),
        sa.Column("item_type", QC_ITEM_TYPE, nullable=False),
        sa.Column("options", sa.JSON(), nullable=True),
        sa.Column("expected_value", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False),
        sa.Column("repeat_per", sa.String(64), nullable=True),
        sa.Column("applicability_condition", sa.Text(), nullable=True),
        sa.Column("related_part_number", sa.String(128), nullable=True),
        sa.Column("related_assembly_id", sa.String(128), nullable=True),
        sa.Column("default_value", sa.Text(), nullable=True),
        sa.Column("notes_prompt", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_cs_qc_form_template_items_template_id", "template_id"),
    )

    # Create cs_order_qc_results table
    op.create_table(
        "cs_order_qc_results",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("order_id", sa.String(64), sa.ForeignKey("cs_orders.id"), nullable=False),
        sa.Column("template_id", sa.String(64), sa.ForeignKey("cs_qc_form_templates.id"), nullable=False),
        sa.Column("build_number", sa.String(64), nullable=True),
        sa.Column("overall_status", QC_STATUS, nullable=False),
        sa.Column("qc_performed_by_id", sa.String(64), sa.ForeignKey("cs_users.id"), nullable=True),
        sa.Column("qc_timestamp", sa.DateTime(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("external_job_id", sa.String(128), nullable=True),
        sa.Column("digital_signature", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("order_id", "template_id", name="uq_cs_order_qc_results_order_template"),
        sa.Index("ix_cs_order_qc_results_order_id", "order_id"),
        sa.Index("ix_cs_order_qc_results_template_id", "template_id"),
    )

    # Create cs_order_qc_item_results table
    op.create_table(
        "cs_order_qc_item_results",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("qc_result_id", sa.String(64), sa.ForeignKey("cs_order_qc_results.id"), nullable=False),
        sa.Column(
            "template_item_id", sa.String(64), sa.ForeignKey("cs_qc_form_template_items.id"), nullable=False
        ),
        sa.Column("result_value", sa.Text(), nullable=True),
        sa.Column("is_conforming", sa.Boolean(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_not_applicable", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_cs_order_qc_item_results_qc_result_id", "qc_result_id"),
    )

    # Create cs_tasks table
    op.create_table(
        "cs_tasks",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("order_id", sa.String(64), sa.ForeignKey("cs_orders.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("priority", TASK_PRIORITY, nullable=False),
        sa.Column("estimated_minutes", sa.Integer(), nullable=True),
        sa.Column("status", TASK_STATUS, nullable=False),
        sa.Column("assigned_to_id", sa.String(64), sa.ForeignKey("cs_users.id"), nullable=True),
        sa.Column("actual_minutes", sa.Integer(), nullable=True),
        sa.Column("started_at", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_cs_tasks_order_id", "order_id"),
        sa.Index("ix_cs_tasks_status", "status"),
        sa.Index("ix_cs_tasks_assigned_to_id", "assigned_to_id"),
    )

    # Create cs_task_dependencies table
    op.create_table(
        "cs_task_dependencies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("task_id", sa.String(64), sa.ForeignKey("cs_tasks.id"), nullable=False),
        sa.Column("depends_on_id", sa.String(64), sa.ForeignKey("cs_tasks.id"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("task_id", "depends_on_id", name="uq_cs_task_dependencies_pair"),
        sa.Index("ix_cs_task_dependencies_task_id", "task_id"),
    )

    # Create cs_task_notes table
    op.create_table(
        "cs_task_notes",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("task_id", sa.String(64), sa.ForeignKey("cs_tasks.id"), nullable=False),
        sa.Column("author_id", sa.String(64), sa.ForeignKey("cs_users.id"), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_cs_task_notes_task_id", "task_id"),
    )

    # Create cs_service_orders table
    op.create_table(
        "cs_service_orders",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("requested_by_id", sa.String(64), sa.ForeignKey("cs_users.id"), nullable=False),
        sa.Column("status", SERVICE_ORDER_STATUS, nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("procurement_notes", sa.Text(), nullable=True),
        sa.Column("approved_by_id", sa.String(64), sa.ForeignKey("cs_users.id"), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("request_timestamp", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_cs_service_orders_requested_by_id", "requested_by_id"),
        sa.Index("ix_cs_service_orders_status", "status"),
        sa.Index("ix_cs_service_orders_request_timestamp", "request_timestamp"),
    )

    # Create cs_service_order_items table
    op.create_table(
        "cs_service_order_items",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("service_order_id", sa.String(64), sa.ForeignKey("cs_service_orders.id"), nullable=False),
        sa.Column("part_id", sa.String(128), sa.ForeignKey("cs_parts.part_id"), nullable=False),
        sa.Column("quantity_requested", sa.Integer(), nullable=False),
        sa.Column("quantity_approved", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_cs_service_order_items_service_order_id", "service_order_id"),
    )

    # Create cs_notifications table
    op.create_table(
        "cs_notifications",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("recipient_id", sa.String(64), sa.ForeignKey("cs_users.id"), nullable=False),
        sa.Column("type", NOTIFICATION_TYPE, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("link_to_order_id", sa.String(64), sa.ForeignKey("cs_orders.id"), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_cs_notifications_recipient_id", "recipient_id"),
        sa.Index("ix_cs_notifications_is_read", "is_read"),
        sa.Index("ix_cs_notifications_created_at", "created_at"),
    )

    _seed_catalog()
    _seed_qc_templates()
    _seed_admin()


def _seed_catalog() -> None:
    parts_table = sa.table(
        "cs_parts",
        sa.column("part_id", sa.String),
        sa.column("name", sa.String),
        sa.column("type", PART_TYPE),
        sa.column("status", PART_STATUS),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    assemblies_table = sa.table(
        "cs_assemblies",
        sa.column("assembly_id", sa.String),
        sa.column("name", sa.String),
        sa.column("type", ASSEMBLY_TYPE),
        sa.column("subcategory_code", sa.String),
        sa.column("can_order", sa.Boolean),
        sa.column("is_kit", sa.Boolean),
        sa.column("status", PART_STATUS),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    components_table = sa.table(
        "cs_assembly_components",
        sa.column("parent_assembly_id", sa.String),
        sa.column("child_part_id", sa.String),
        sa.column("quantity", sa.Integer),
    )

    def kit(assembly_id, name, assembly_type="KIT", subcategory_code=None):
        return {
            "assembly_id": assembly_id,
            "name": name,
            "type": assembly_type,
            "subcategory_code": subcategory_code,
            "can_order": True,
            "is_kit": assembly_type == "KIT",
            "status": "ACTIVE",
            **_timestamps(),
        }

    assemblies = []
    for group in (LEG_KITS, FEET_KITS, BASIN_KITS, ACCESSORY_KITS):
        assemblies += [kit(assembly_id, name) for assembly_id, name in group.items()]
    assemblies += [kit(assembly_id, name, "COMPLEX") for assembly_id, name in SINK_BODIES.items()]
    assemblies += [kit(assembly_id, name, "SIMPLE") for assembly_id, name in BASIN_SIZES.items()]
    for size in PEGBOARD_SIZES:
        assemblies.append(kit(f"T2-ADW-PB-{size}", f"Pegboard {size}", "SIMPLE"))
        for code, label in PEGBOARD_TYPES.items():
            assemblies.append(kit(f"T2-ADW-PB-{size}-{code}-KIT", f"{label} Pegboard Kit {size}"))
            for color in PEGBOARD_COLORS:
                assemblies.append(
                    kit(f"T2-ADW-PB-{size}-{color}-{code}-KIT", f"{label} Pegboard Kit {size}, {color.title()}")
                )
    for box_id, (e_drain, e_sink, subcategory_code) in CONTROL_BOXES.items():
        name = ", ".join(
            label for count, label in ((e_drain, f"{e_drain} E-Drain"), (e_sink, f"{e_sink} E-Sink")) if count
        )
        assemblies.append(kit(box_id, f"Control Box, {name}", "COMPLEX", subcategory_code))
    op.bulk_insert(assemblies_table, assemblies)

    op.bulk_insert(
        parts_table,
        [
            {"part_id": part_id, "name": name, "type": "COMPONENT", "status": "ACTIVE", **_timestamps()}
            for part_id, name in CONTROL_BOX_PARTS.items()
        ],
    )

    components = []
    for box_id, (e_drain, e_sink, _) in CONTROL_BOXES.items():
        boards = e_drain + e_sink
        quantities = {part_id: 1 for part_id in BASE_PARTS}
        for part_id in PER_E_DRAIN_PARTS:
            quantities[part_id] = quantities.get(part_id, 0) + e_drain
        for part_id in PER_E_SINK_PARTS:
            quantities[part_id] = quantities.get(part_id, 0) + e_sink
        for part_id in PER_BOARD_PARTS:
            quantities[part_id] = boards
        if e_drain >= 2 or e_sink >= 2 or boards > 2:
            quantities["T2-UPG-CTRL-BOX-BRKT"] = 1
        components += [
            {"parent_assembly_id": box_id, "child_part_id": part_id, "quantity": quantity}
            for part_id, quantity in quantities.items()
            if quantity
        ]
    op.bulk_insert(components_table, components)


def _seed_qc_templates() -> None:
    templates_table = sa.table(
        "cs_qc_form_templates",
        sa.column("id", sa.String),
        sa.column("name", sa.String),
        sa.column("form_type", sa.String),
        sa.column("version", sa.String),
        sa.column("description", sa.Text),
        sa.column("applies_to_product_family", sa.String),
        sa.column("is_active", sa.Boolean),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    items_table = sa.table(
        "cs_qc_form_template_items",
        sa.column("id", sa.String),
        sa.column("template_id", sa.String),
        sa.column("section", sa.String),
        sa.column("checklist_item", sa.Text),
        sa.column("item_type", QC_ITEM_TYPE),
        sa.column("order", sa.Integer),
        sa.column("is_required", sa.Boolean),
    )

    templates, items = [], []
    for name, form_type, checks in QC_TEMPLATES:
        template_id = uuid4().hex
        templates.append(
            {
                "id": template_id,
                "name": name,
                "form_type": form_type,
                "version": "1.0",
                "description": f"Default {name} form",
                "applies_to_product_family": "MDRD_T2_SINK",
                "is_active": True,
                **_timestamps(),
            }
        )
        for order, (section, checklist_item, item_type) in enumerate(checks, start=1):
            items.append(
                {
                    "id": uuid4().hex,
                    "template_id": template_id,
                    "section": section,
                    "checklist_item": checklist_item,
                    "item_type": item_type,
                    "order": order,
                    "is_required": True,
                }
            )
    op.bulk_insert(templates_table, templates)
    op.bulk_insert(items_table, items)


def _seed_admin() -> None:
    password = os.getenv("CLEANSTATION_ADMIN_PASSWORD")
    if not password:
        return
    users_table = sa.table(
        "cs_users",
        sa.column("id", sa.String),
        sa.column("username", sa.String),
        sa.column("email", sa.String),
        sa.column("full_name", sa.String),
        sa.column("initials", sa.String),
        sa.column("role", USER_ROLE),
        sa.column("is_active", sa.Boolean),
        sa.column("password_hash", sa.String),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    op.bulk_insert(
        users_table,
        [
            {
                "id": uuid4().hex,
                "username": os.getenv("CLEANSTATION_ADMIN_USERNAME", "admin"),
                "email": os.getenv("CLEANSTATION_ADMIN_EMAIL", "admin@cleanstation.local"),
                "full_name": "Administrator",
                "initials": "ADM",
                "role": "ADMIN",
                "is_active": True,
                "password_hash": generate_password_hash(password),
                **_timestamps(),
            }
        ],
    )


def downgrade() -> None:
    """Drop all tables and enum types."""
    op.drop_table("cs_notifications")
    op.drop_table("cs_service_order_items")
    op.drop_table("cs_service_orders")
    op.drop_table("cs_task_notes")
    op.drop_table("cs_task_dependencies")
    op.drop_table("cs_tasks")
    op.drop_table("cs_order_qc_item_results")
    op.drop_table("cs_order_qc_results")
    op.drop_table("cs_qc_form_template_items")
    op.drop_table("cs_qc_form_templates")
    op.drop_table("cs_outsourced_parts")
    op.drop_table("cs_bom_items")
    op.drop_table("cs_order_history_logs")
    op.drop_table("cs_orders")
    op.drop_table("cs_assembly_components")
    op.drop_table("cs_assemblies")
    op.drop_table("cs_parts")
    op.drop_table("cs_user_sessions")
    op.drop_table("cs_users")

    bind = op.get_bind()
    for enum_type in ENUM_TYPES:
        enum_type.drop(bind, checkfirst=True)
