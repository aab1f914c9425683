"""Sink configuration models.

A sink configuration describes one build number of an order: model, length,
legs, feet, pegboard, basins and fittings. The same models are used for API
bodies (camelCase or snake_case keys) and for the JSON stored on the order.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import Language


class ConfigModel(BaseModel):
    """Accepts both camelCase and snake_case keys; extra keys are ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class BasinConfiguration(ConfigModel):
    basin_type_id: Optional[str] = Field(default=None, description="Basin type kit, e.g. T2-BSN-EDR-KIT")
    basin_size_part_number: Optional[str] = Field(default=None)
    addon_ids: List[str] = Field(default_factory=list)


class FaucetConfiguration(ConfigModel):
    faucet_type_id: str
    quantity: int = Field(default=1, ge=1)


class SprayerConfiguration(ConfigModel):
    sprayer_type_id: str
    location: Optional[str] = None


class SinkConfiguration(ConfigModel):
    """Configuration of a single sink (build number)."""

    sink_model_id: Optional[str] = None
    length: Optional[float] = None
    sink_length: Optional[float] = None
    width: Optional[float] = None
    legs_type_id: Optional[str] = None
    leg_type_id: Optional[str] = None
    feet_type_id: Optional[str] = None
    pegboard: bool = False
    pegboard_type_id: Optional[str] = None
    pegboard_type: Optional[str] = None
    pegboard_color: Optional[str] = None
    pegboard_size_part_number: Optional[str] = None
    specific_pegboard_kit_id: Optional[str] = None
    drawers_and_compartments: List[str] = Field(default_factory=list)
    basins: List[BasinConfiguration] = Field(default_factory=list)
    faucet_type_id: Optional[str] = None
    faucet_quantity: Optional[int] = None
    faucets: List[FaucetConfiguration] = Field(default_factory=list)
    sprayer: bool = False
    sprayer_type_ids: List[str] = Field(default_factory=list)
    sprayers: List[SprayerConfiguration] = Field(default_factory=list)
    control_box_id: Optional[str] = None

    @property
    def actual_length(self) -> Optional[float]:
        return self.length or self.sink_length

    @property
    def actual_leg_type_id(self) -> Optional[str]:
        return self.leg_type_id or self.legs_type_id

    @property
    def has_sprayers(self) -> bool:
        return bool(self.sprayers) or (self.sprayer and bool(self.sprayer_type_ids))


class AccessoryItem(ConfigModel):
    assembly_id: str
    quantity: int = Field(default=1, ge=0)


class CustomerInfo(ConfigModel):
    language: Language = Language.EN


class OrderData(ConfigModel):
    """Input of BOM generation: an order's builds with their configurations."""

    customer: CustomerInfo = Field(default_factory=CustomerInfo)
    build_numbers: List[str] = Field(min_length=1)
    configurations: Dict[str, SinkConfiguration] = Field(default_factory=dict)
    accessories: Dict[str, List[AccessoryItem]] = Field(default_factory=dict)
