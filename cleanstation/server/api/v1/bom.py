"""
BOM Preview Endpoint.

Generates a bill of materials for order data without persisting it.
"""

from typing import Any, Dict

from fastapi import APIRouter, Request

from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.configuration import OrderData
from cleanstation.core.rules import BomGenerator
from cleanstation.server.core.database import ReposDep
from cleanstation.server.core.security import CurrentUser
from cleanstation.server.responses import ApiResponse, ok

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/generate",
    response_model=ApiResponse[Dict[str, Any]],
    summary="Preview BOM",
    description="Generate the hierarchical and flattened BOM for order data.",
    responses={422: {"description": "Configuration cannot be turned into a BOM"}},
)
async def generate_bom(body: OrderData, request: Request, user: CurrentUser, repos: ReposDep):
    """
    Preview a BOM.

    - **customer.language**: Manual language (EN, FR, ES).
    - **buildNumbers**: Build numbers to include.
    - **configurations**: Sink configuration per build number.
    - **accessories**: Accessory lines per build number.
    """
    result = await BomGenerator(repos.catalog).generate(body)
    logger.debug(f"Previewed BOM with {result.total_items} lines for {len(body.build_numbers)} builds")
    return ok(request, result.to_dict())
