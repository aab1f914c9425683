"""
Configurator Endpoints.

Option lookups for the sink configuration wizard and control box selection.
All answers come from the packaged catalog rule data.
"""

from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Query, Request

from cleanstation.core.errors import ValidationError
from cleanstation.core.models.io.configurator import ControlBoxRequest
from cleanstation.core.rules import configurator
from cleanstation.server.core.security import CurrentUser
from cleanstation.server.responses import ApiResponse, ok

router = APIRouter()


def _query_handlers(
    family: str, width: Optional[float], length: Optional[float], basin_type: str
) -> Dict[str, Callable[[], Any]]:
    return {
        "sinkFamilies": configurator.get_sink_families,
        "sinkModels": lambda: configurator.get_sink_models(family),
        "legTypes": configurator.get_leg_types,
        "feetTypes": configurator.get_feet_types,
        "pegboardOptions": lambda: configurator.get_pegboard_options(width, length),
        "basinTypes": configurator.get_basin_type_options,
        "basinSizes": configurator.get_basin_size_options,
        "basinAddons": configurator.get_basin_addon_options,
        "faucetTypes": lambda: configurator.get_faucet_type_options(basin_type),
        "sprayerTypes": configurator.get_sprayer_type_options,
        "all": configurator.get_all_options,
    }


@router.get(
    "",
    response_model=ApiResponse[Any],
    summary="Configurator Options",
    description="Look up one group of configuration options selected by queryType.",
    responses={400: {"description": "Unknown queryType"}},
)
async def get_options(
    request: Request,
    user: CurrentUser,
    query_type: str = Query("all", alias="queryType"),
    family: str = Query("MDRD"),
    width: Optional[float] = Query(None, gt=0),
    length: Optional[float] = Query(None, gt=0),
    basin_type: str = Query("", alias="basinType"),
):
    """
    Get configurator options.

    - **queryType**: sinkFamilies, sinkModels, legTypes, feetTypes, pegboardOptions,
      basinTypes, basinSizes, basinAddons, faucetTypes, sprayerTypes or all.
    - **family**: Sink family for sinkModels (default MDRD).
    - **width** / **length**: Sink dimensions for the pegboard recommendation.
    - **basinType**: Basin kind for the faucet default.
    """
    handlers = _query_handlers(family, width, length, basin_type)
    handler = handlers.get(query_type)
    if handler is None:
        raise ValidationError(
            f"Unknown queryType: {query_type}",
            details={"allowed": sorted(handlers)},
        )
    return ok(request, handler())


@router.post(
    "/control-box",
    response_model=ApiResponse[Any],
    summary="Select Control Box",
    description="Pick the control box for a set of basins from their E-Drain / E-Sink counts.",
)
async def select_control_box(body: ControlBoxRequest, request: Request, user: CurrentUser):
    """
    Select a control box.

    Returns ``null`` data when the basin mix has no matching control box.
    """
    return ok(request, configurator.get_control_box(body.basin_configurations))
