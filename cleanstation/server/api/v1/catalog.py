"""
Catalog Endpoints.

Parts and assemblies. Everyone may read; only ADMIN may write.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from cleanstation.core.database.entities.catalog import Assembly, AssemblyComponent, Part
from cleanstation.core.errors import ConflictError, NotFoundError, ValidationError
from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.enums import AssemblyType, PartStatus, PartType, UserRole
from cleanstation.core.models.io.catalog import AssemblyCreate, AssemblyDetail, AssemblyRead, PartCreate, PartRead
from cleanstation.server.core.database import ReposDep
from cleanstation.server.core.security import CurrentUser, require_roles
from cleanstation.server.responses import ApiResponse, ok, paginate

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/parts",
    response_model=ApiResponse[List[PartRead]],
    summary="List Parts",
    description="Search parts by name or number with type/status filters and pagination.",
)
async def list_parts(
    request: Request,
    user: CurrentUser,
    repos: ReposDep,
    search: Optional[str] = Query(None),
    part_type: Optional[PartType] = Query(None, alias="type"),
    part_status: Optional[PartStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    parts, total = await repos.parts.browse(
        search=search, part_type=part_type, status=part_status, page=page, limit=limit
    )
    return ok(request, [PartRead.model_validate(p) for p in parts], paginate(page, limit, total))


@router.post(
    "/parts",
    response_model=ApiResponse[PartRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Part",
    description="Add a part to the catalog.",
    responses={409: {"description": "Part number already exists"}},
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def create_part(body: PartCreate, request: Request, repos: ReposDep):
    if await repos.parts.get_by_id(body.part_id):
        raise ConflictError(f"Part {body.part_id} already exists")
    part = await repos.parts.create(Part.model_validate(body.model_dump()))
    return ok(request, PartRead.model_validate(part))


@router.get(
    "/assemblies",
    response_model=ApiResponse[List[AssemblyRead]],
    summary="List Assemblies",
    description="Search assemblies and kits with type/category filters and pagination.",
)
async def list_assemblies(
    request: Request,
    user: CurrentUser,
    repos: ReposDep,
    search: Optional[str] = Query(None),
    assembly_type: Optional[AssemblyType] = Query(None, alias="type"),
    category_code: Optional[str] = Query(None, alias="categoryCode"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    assemblies, total = await repos.assemblies.search(
        search=search, assembly_type=assembly_type, category_code=category_code, page=page, limit=limit
    )
    return ok(request, [AssemblyRead.model_validate(a) for a in assemblies], paginate(page, limit, total))


@router.get(
    "/assemblies/{assembly_id}",
    response_model=ApiResponse[AssemblyDetail],
    summary="Get Assembly",
    description="Get an assembly with its component list.",
    responses={404: {"description": "Assembly not found"}},
)
async def get_assembly(assembly_id: str, request: Request, user: CurrentUser, repos: ReposDep):
    assembly = await repos.assemblies.get_by_id(assembly_id)
    if assembly is None:
        raise NotFoundError("Assembly", assembly_id)
    components = await repos.assemblies.get_components(assembly_id)
    detail = AssemblyDetail.model_validate(
        {**AssemblyRead.model_validate(assembly).model_dump(), "components": [c.model_dump() for c in components]}
    )
    return ok(request, detail)


@router.post(
    "/assemblies",
    response_model=ApiResponse[AssemblyDetail],
    status_code=status.HTTP_201_CREATED,
    summary="Create Assembly",
    description="Add an assembly with its component links.",
    responses={
        400: {"description": "A component references an unknown part or assembly"},
        409: {"description": "Assembly id already exists"},
    },
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def create_assembly(body: AssemblyCreate, request: Request, repos: ReposDep):
    """
    Create an assembly.

    - **components**: Links to child parts or child assemblies with quantities.
    """
    if await repos.assemblies.get_by_id(body.assembly_id):
        raise ConflictError(f"Assembly {body.assembly_id} already exists")
    for component in body.components:
        if component.child_part_id and await repos.parts.get_by_id(component.child_part_id) is None:
            raise ValidationError(f"Unknown part {component.child_part_id}")
        if component.child_assembly_id and await repos.assemblies.get_by_id(component.child_assembly_id) is None:
            raise ValidationError(f"Unknown assembly {component.child_assembly_id}")

    assembly = await repos.assemblies.add(Assembly.model_validate(body.model_dump(exclude={"components"})))
    for component in body.components:
        await repos.assemblies.add_component(
            AssemblyComponent(parent_assembly_id=assembly.assembly_id, **component.model_dump())
        )
    await repos.commit()
    logger.info(f"Created assembly {assembly.assembly_id} with {len(body.components)} components")
    components = await repos.assemblies.get_components(assembly.assembly_id)
    detail = AssemblyDetail.model_validate(
        {**AssemblyRead.model_validate(assembly).model_dump(), "components": [c.model_dump() for c in components]}
    )
    return ok(request, detail)
