"""
Assembly Task Endpoints.

Shop-floor tasks of an order with dependencies and notes. Assemblers only
see and update their own tasks.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from cleanstation.core.database.base import utc_now
from cleanstation.core.database.entities.tasks import Task
from cleanstation.core.database.entities.users import User
from cleanstation.core.database.repositories import RepoBundle
from cleanstation.core.errors import BusinessRuleError, NotFoundError, PermissionDeniedError
from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.enums import NotificationType, TaskPriority, TaskStatus, UserRole
from cleanstation.core.models.io.tasks import (
    TaskCreate,
    TaskDetail,
    TaskNoteCreate,
    TaskNoteRead,
    TaskRead,
    TaskStatusUpdate,
)
from cleanstation.core.rules.transitions import validate_task_transition
from cleanstation.server.core.database import ReposDep
from cleanstation.server.core.security import CurrentUser, require_roles
from cleanstation.server.responses import ApiResponse, ok, paginate
from cleanstation.server.services.workflow import get_order_or_404

logger = get_logger(__name__)

router = APIRouter()

ASSIGNABLE_ROLES = (UserRole.ASSEMBLER, UserRole.PRODUCTION_COORDINATOR)


def _task_read(task: Task, dependencies: List[str]) -> TaskRead:
    return TaskRead(**task.model_dump(), dependencies=dependencies)


async def _get_task(repos: RepoBundle, task_id: str, user: User) -> Task:
    task = await repos.tasks.get_by_id(task_id)
    if task is None:
        raise NotFoundError("Task", task_id)
    if user.role == UserRole.ASSEMBLER and task.assigned_to_id != user.id:
        raise PermissionDeniedError("Assemblers can only access their own tasks")
    return task


async def _task_detail(repos: RepoBundle, task: Task) -> TaskDetail:
    notes = await repos.tasks.get_notes(task.id)
    return TaskDetail(
        **task.model_dump(),
        dependencies=await repos.tasks.get_dependency_ids(task.id),
        notes=[TaskNoteRead.model_validate(n) for n in notes],
    )


@router.get(
    "",
    response_model=ApiResponse[List[TaskRead]],
    summary="List Tasks",
    description="List assembly tasks with filters and pagination; assemblers only get their own.",
)
async def list_tasks(
    request: Request,
    user: CurrentUser,
    repos: ReposDep,
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = Query(None),
    order_id: Optional[str] = Query(None, alias="orderId"),
    assigned_to: Optional[str] = Query(None, alias="assignedTo"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """
    List tasks.

    - **status** / **priority**: Filters.
    - **orderId**: Tasks of one order.
    - **assignedTo**: Tasks of one user; forced to the caller for assemblers.
    """
    if user.role == UserRole.ASSEMBLER:
        assigned_to = user.id
    tasks, total = await repos.tasks.search(
        status=task_status, priority=priority, order_id=order_id, assigned_to_id=assigned_to, page=page, limit=limit
    )
    deps = await repos.tasks.get_dependency_map([t.id for t in tasks])
    return ok(request, [_task_read(t, deps[t.id]) for t in tasks], paginate(page, limit, total))


@router.post(
    "",
    response_model=ApiResponse[TaskDetail],
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    responses={422: {"description": "Invalid assignee or unknown dependency"}},
)
async def create_task(
    body: TaskCreate,
    request: Request,
    repos: ReposDep,
    user: User = Depends(require_roles(UserRole.ADMIN, UserRole.PRODUCTION_COORDINATOR)),
):
    """
    Create an assembly task.

    - **assignedToId**: Must be an assembler or production coordinator.
    - **dependencies**: Existing task ids that must complete before this task starts.
    """
    order = await get_order_or_404(repos, body.order_id)
    assignee = None
    if body.assigned_to_id:
        assignee = await repos.users.get_by_id(body.assigned_to_id)
        if assignee is None or assignee.role not in ASSIGNABLE_ROLES:
            raise BusinessRuleError("Tasks can only be assigned to assemblers or production coordinators")

    dependency_ids = list(dict.fromkeys(body.dependencies))
    found = {t.id for t in await repos.tasks.get_many(dependency_ids)}
    missing = [task_id for task_id in dependency_ids if task_id not in found]
    if missing:
        raise BusinessRuleError("Dependency tasks not found", details={"missing": missing})

    task = Task(**body.model_dump(exclude={"dependencies"}))
    await repos.tasks.add(task)
    for depends_on_id in dependency_ids:
        await repos.tasks.add_dependency(task.id, depends_on_id)
    if assignee is not None:
        await repos.notifications.notify(
            assignee.id,
            f"New task: {task.title}",
            f"You were assigned '{task.title}' on order {order.po_number}.",
            type=NotificationType.TASK_ASSIGNMENT,
            link_to_order_id=order.id,
        )
    await repos.commit()
    await repos.tasks.refresh(task)
    logger.info(f"Created task {task.id} on order {order.po_number}")
    return ok(request, await _task_detail(repos, task))


@router.get(
    "/{task_id}",
    response_model=ApiResponse[TaskDetail],
    summary="Get Task",
    responses={403: {"description": "Task of another assembler"}, 404: {"description": "Task not found"}},
)
async def get_task(task_id: str, request: Request, user: CurrentUser, repos: ReposDep):
    task = await _get_task(repos, task_id, user)
    return ok(request, await _task_detail(repos, task))


@router.put(
    "/{task_id}/status",
    response_model=ApiResponse[TaskDetail],
    summary="Update Task Status",
    responses={
        403: {"description": "Task of another assembler"},
        422: {"description": "Transition not allowed or dependencies incomplete"},
    },
)
async def update_task_status(
    task_id: str, body: TaskStatusUpdate, request: Request, user: CurrentUser, repos: ReposDep
):
    """
    Change a task's status.

    Starting a task requires every dependency to be completed. Each change
    adds a note to the task.
    """
    task = await _get_task(repos, task_id, user)
    current = TaskStatus(task.status)
    validate_task_transition(current, body.status)

    if body.status == TaskStatus.IN_PROGRESS:
        blocking = await repos.tasks.get_incomplete_dependencies(task.id)
        if blocking:
            raise BusinessRuleError(
                "Cannot start task with incomplete dependencies",
                details={"incomplete": [t.id for t in blocking]},
            )
        task.started_at = utc_now()
    elif body.status == TaskStatus.COMPLETED:
        task.completed_at = utc_now()
    if body.actual_minutes is not None:
        task.actual_minutes = body.actual_minutes
    task.status = body.status
    await repos.tasks.add(task)

    note = f"Status changed from {current.value} to {body.status.value}"
    if body.notes:
        note = f"{note}: {body.notes}"
    await repos.tasks.add_note(task.id, note, author_id=user.id)
    await repos.commit()
    await repos.tasks.refresh(task)
    return ok(request, await _task_detail(repos, task))


@router.post(
    "/{task_id}/notes",
    response_model=ApiResponse[TaskNoteRead],
    status_code=status.HTTP_201_CREATED,
    summary="Add Task Note",
)
async def add_task_note(task_id: str, body: TaskNoteCreate, request: Request, user: CurrentUser, repos: ReposDep):
    task = await _get_task(repos, task_id, user)
    note = await repos.tasks.add_note(task.id, body.content, author_id=user.id)
    await repos.commit()
    return ok(request, TaskNoteRead.model_validate(note))
