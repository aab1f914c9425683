"""
Configurator request models.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import Field

from .common import RequestModel


class ControlBoxRequest(RequestModel):
    basin_configurations: List[Dict[str, Any]] = Field(
        default_factory=list, description="Basins naming their kind (E_DRAIN) or kit (T2-BSN-EDR-KIT)"
    )
