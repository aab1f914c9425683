"""
Health Check Endpoints.

This module provides basic system status endpoints (health, version)
used for monitoring and deployment verification.
"""

from fastapi import APIRouter

from cleanstation.core.rules import load_rules
from cleanstation.server.core.constant import API_VERSION, APP_VERSION

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return {"status": "ok"}


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server and its catalog rules.",
    response_description="Version object.",
)
async def version():
    """
    Get API version.

    Returns the service version, the API schema version and the version of
    the packaged catalog rule data.
    """
    return {"version": APP_VERSION, "schema_version": API_VERSION, "rules_version": load_rules().version}
