"""Rule data loader.

Every lookup table used by the configurator, the BOM generator, the Pre-QC
checklist generator and the procurement extraction lives in the packaged
``data/catalog_rules.json`` document. This module validates that document
into pydantic models and caches the result for the life of the process.

A malformed rules file raises ``pydantic.ValidationError`` on first access,
which surfaces at application startup.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.enums import BasinKind

logger = get_logger(__name__)

RULES_PACKAGE = "cleanstation.core.rules.data"
RULES_FILE = "catalog_rules.json"


class _RuleModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class SinkFamilyRule(_RuleModel):
    code: str
    name: str
    available: bool
    description: str = ""


class SinkModelRule(_RuleModel):
    id: str
    name: str
    basin_count: int = Field(ge=1)


class NamedKit(_RuleModel):
    id: str
    name: str


class FeetRule(NamedKit):
    kind: str = Field(description="LEVELING_CASTERS or LEVELING_FEET; drives the Pre-QC wording")


class PegboardTypeRule(_RuleModel):
    id: str
    name: str
    code: str = Field(description="Kit id suffix, e.g. PERF")


class LengthRange(_RuleModel):
    min_length: int
    max_length: int

    def covers(self, length: float) -> bool:
        return self.min_length <= length <= self.max_length


class PegboardSizeRule(LengthRange):
    size: str


class PegboardRules(_RuleModel):
    types: List[PegboardTypeRule]
    colors: List[str]
    sizes: List[PegboardSizeRule]
    kit_prefix: str
    mandatory_kit: str
    color_component: str
    custom_size_prefix: str

    def type_code(self, pegboard_type: str) -> str:
        for rule in self.types:
            if rule.id == pegboard_type:
                return rule.code
        return "SOLID"

    def covering_size(self, length: float) -> Optional[PegboardSizeRule]:
        for rule in self.sizes:
            if rule.covers(length):
                return rule
        return None

    def size_for_length(self, length: float) -> PegboardSizeRule:
        """Get the pegboard size covering ``length``; longer sinks use the largest size."""
        return self.covering_size(length) or self.sizes[-1]


class BasinTypeRule(_RuleModel):
    kind: BasinKind
    kit_id: str
    name: str


class BasinAddonRule(NamedKit):
    subcategory_code: str


class ControlBoxRule(_RuleModel):
    id: str
    name: str
    e_drain: int = Field(ge=0)
    e_sink: int = Field(ge=0)
    subcategory_code: str


class ControlBoxRecipe(_RuleModel):
    base: List[str]
    per_e_drain: List[str]
    per_e_sink: List[str]
    per_board: List[str]
    bracket: str


class SinkBodyRule(LengthRange):
    id: str


class ProcurementRules(_RuleModel):
    legs: List[str]
    feet: List[str]
    milestones: Dict[str, str]


class PreQcRules(_RuleModel):
    standard_basin_dimensions: Dict[str, str]
    default_basin_dimensions: str
    drain_locations: List[str]
    pegboard_height_ratio: float
    default_sink_width: float


class CatalogRules(_RuleModel):
    """Validated content of ``catalog_rules.json``."""

    version: str
    sink_families: List[SinkFamilyRule]
    sink_models: Dict[str, List[SinkModelRule]]
    legs: List[NamedKit]
    fixed_height_marker: str
    feet: List[FeetRule]
    pegboard: PegboardRules
    basin_types: List[BasinTypeRule]
    basin_sizes: List[str]
    basin_custom_size_prefix: str
    basin_addons: List[BasinAddonRule]
    faucets: List[NamedKit]
    di_faucet: str
    sprayers: List[NamedKit]
    control_boxes: List[ControlBoxRule]
    control_box_recipe: ControlBoxRecipe
    manual_kits: Dict[str, str]
    sink_bodies: List[SinkBodyRule]
    procurement: ProcurementRules
    pre_qc: PreQcRules

    def expected_basin_count(self, sink_model_id: Optional[str]) -> int:
        for models in self.sink_models.values():
            for model in models:
                if model.id == sink_model_id:
                    return model.basin_count
        return 0

    def basin_kind_for_kit(self, kit_id: Optional[str]) -> Optional[BasinKind]:
        for rule in self.basin_types:
            if rule.kit_id == kit_id:
                return rule.kind
        return None

    def control_box(self, box_id: str) -> Optional[ControlBoxRule]:
        for rule in self.control_boxes:
            if rule.id == box_id:
                return rule
        return None

    def control_box_for_counts(self, e_drain: int, e_sink: int) -> Optional[ControlBoxRule]:
        for rule in self.control_boxes:
            if rule.e_drain == e_drain and rule.e_sink == e_sink:
                return rule
        return None

    def manual_kit(self, language: Optional[str]) -> str:
        return self.manual_kits.get(language or "EN", self.manual_kits["EN"])

    def sink_body_for_length(self, length: float) -> Optional[SinkBodyRule]:
        for rule in self.sink_bodies:
            if rule.covers(length):
                return rule
        return None

    def is_height_adjustable(self, leg_id: str) -> bool:
        return self.fixed_height_marker not in leg_id


def parse_rules(raw: str) -> CatalogRules:
    """Validate a rules document given as JSON text."""
    return CatalogRules.model_validate_json(raw)


@lru_cache(maxsize=1)
def load_rules() -> CatalogRules:
    """Load and validate the packaged rule data once per process.

    Returns:
        The validated ``CatalogRules``
    """
    raw = resources.files(RULES_PACKAGE).joinpath(RULES_FILE).read_text(encoding="utf-8")
    rules = parse_rules(raw)
    logger.info(f"Loaded catalog rules version {rules.version}")
    return rules
