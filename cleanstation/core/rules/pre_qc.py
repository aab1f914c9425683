"""Pre-QC checklist generation.

Builds the Pre-QC inspection checklist of one sink from its configuration:
job id, pegboard, feet and lifter controls, drilled holes, per-basin checks
and the final sink dimensions.
"""

from __future__ import annotations

import math
from typing import List, Optional

from pydantic import BaseModel, Field

from cleanstation.core.models.domain.configuration import SinkConfiguration
from cleanstation.core.models.domain.enums import QcItemType

from .catalog import CatalogRules, load_rules
from .configurator import parse_basin_dimensions


class PreQcItem(BaseModel):
    """Generated checklist line."""

    id: str
    order: int
    checklist_item: str
    item_type: QcItemType
    is_required: bool
    section: str
    options: Optional[List[str]] = None


class SinkDimensions(BaseModel):
    width: float
    length: float
    unit: str = "inches"


class StructuralPart(BaseModel):
    type_id: str = ""
    name: str = ""
    type: str = ""


class BasinDimensions(BaseModel):
    width: float
    length: float
    depth: float


class PreQcBasin(BaseModel):
    position: int
    type: str = ""
    size: str = ""
    addons: List[str] = Field(default_factory=list)
    dimensions: Optional[BasinDimensions] = None


class PreQcConfiguration(BaseModel):
    """Sink description consumed by :class:`PreQCTemplateGenerator`."""

    build_number: str
    sink_model: str = ""
    dimensions: SinkDimensions
    legs: StructuralPart = Field(default_factory=StructuralPart)
    feet: StructuralPart = Field(default_factory=StructuralPart)
    pegboard: bool = False
    pegboard_type: Optional[str] = None
    basins: List[PreQcBasin] = Field(default_factory=list)
    additional_features: List[str] = Field(default_factory=list)


def _fmt(value: float) -> str:
    return f"{value:g}"


class PreQCTemplateGenerator:
    """Generate the Pre-QC checklist of one sink.

    Item ids are ``preqc-{n}`` counting from zero and ``order`` is
    ``(n + 1) * 10`` so inspectors can insert items between generated ones.
    """

    def __init__(self, configuration: PreQcConfiguration, rules: Optional[CatalogRules] = None):
        self.config = configuration
        self.rules = rules or load_rules()
        self._items: List[PreQcItem] = []

    def generate_checklist(self) -> List[PreQcItem]:
        self._items = []
        self._add_job_id()
        self._add_pegboard()
        self._add_structural()
        self._add_holes()
        self._add_basins()
        self._add_final_assembly()
        return sorted(self._items, key=lambda item: item.order)

    def _add(
        self,
        checklist_item: str,
        section: str,
        item_type: QcItemType = QcItemType.CHECKBOX,
        is_required: bool = True,
        options: Optional[List[str]] = None,
    ) -> None:
        n = len(self._items)
        self._items.append(
            PreQcItem(
                id=f"preqc-{n}",
                order=(n + 1) * 10,
                checklist_item=checklist_item,
                item_type=item_type,
                is_required=is_required,
                section=section,
                options=options,
            )
        )

    def _add_job_id(self) -> None:
        self._add("Job ID Number verified", "Job Information", QcItemType.TEXT_INPUT)

    def _add_pegboard(self) -> None:
        if not self.config.pegboard:
            return
        dims = self.config.dimensions
        height = math.floor(dims.length * self.rules.pre_qc.pegboard_height_ratio)
        self._add(
            f"Pegboard: Yes - {_fmt(dims.width)}″ × {height}″ perforated pegboard installed and secured",
            "Structural Components",
        )

    def _add_structural(self) -> None:
        feet = self.config.feet
        if feet.type == "LEVELING_CASTERS":
            self._add(
                f"{feet.name} installed and functional - test locking mechanism and leveling adjustment",
                "Structural Components",
            )
        elif feet.type == "LEVELING_FEET":
            self._add(
                f"{feet.name} installed and functional - test leveling adjustment mechanism",
                "Structural Components",
            )

        legs = self.config.legs
        if legs.type_id and self.rules.is_height_adjustable(legs.type_id):
            self._add(
                "DPF1K (Non-Programmable) lifter control button installed and functional",
                "Structural Components",
                is_required=False,
            )
            self._add(
                "DP1C (Programmable) lifter control button installed and functional",
                "Structural Components",
                is_required=False,
            )
            self._add("Lifter controller installed underneath sink and properly mounted", "Structural Components")

    def _add_holes(self) -> None:
        for basin in self.config.basins:
            if "BASIN_LIGHT" in basin.addons or "LIGHT" in basin.addons:
                self._add(f"Basin {basin.position}: Light hole drilled and positioned correctly", "Mounting & Holes")
            if "DRAIN_BUTTON" in basin.addons:
                self._add(
                    f"Basin {basin.position}: Drain button hole drilled and positioned correctly", "Mounting & Holes"
                )
        if "SPRAYER" in self.config.additional_features:
            self._add("Sprayer hole drilled at correct position per specifications", "Mounting & Holes")
        self._add("Faucet mounting holes drilled and positioned per drawing specifications", "Mounting & Holes")
        self._add("All mounting holes match drawing specifications - check positions and sizes", "Mounting & Holes")

    def _basin_dimensions(self, basin: PreQcBasin) -> str:
        if basin.dimensions is not None:
            d = basin.dimensions
            return f"{_fmt(d.width)}″ × {_fmt(d.length)}″ × {_fmt(d.depth)}″"
        pre_qc = self.rules.pre_qc
        return pre_qc.standard_basin_dimensions.get(basin.size, pre_qc.default_basin_dimensions)

    def _add_basins(self) -> None:
        for basin in self.config.basins:
            self._add(
                f"Basin {basin.position}: {self._basin_dimensions(basin)} dimensions verified and match specifications",
                "Basin Inspection",
            )
            self._add(
                f"Basin {basin.position}: Drain location verified",
                "Basin Inspection",
                QcItemType.SINGLE_SELECT,
                options=list(self.rules.pre_qc.drain_locations),
            )

    def _add_final_assembly(self) -> None:
        dims = self.config.dimensions
        self._add(
            f"Sink dimensions: {_fmt(dims.width)}″ × {_fmt(dims.length)}″ verified and match specifications",
            "Final Assembly",
        )


def _addon_tokens(addon_ids: List[str]) -> List[str]:
    tokens = []
    for addon_id in addon_ids:
        upper = addon_id.upper()
        if "LIGHT" in upper:
            tokens.append("BASIN_LIGHT")
        elif "DRAIN-BUTTON" in upper or "DRAIN_BUTTON" in upper:
            tokens.append("DRAIN_BUTTON")
        else:
            tokens.append(addon_id)
    return tokens


def _size_dimensions(part_number: Optional[str]) -> Optional[BasinDimensions]:
    dims = parse_basin_dimensions((part_number or "").upper())
    if dims is None:
        return None
    width, length, depth = (float(value) for value in dims.split("X"))
    return BasinDimensions(width=width, length=length, depth=depth)


def build_pre_qc_configuration(
    build_number: str, config: SinkConfiguration, rules: Optional[CatalogRules] = None
) -> PreQcConfiguration:
    """Describe a stored sink configuration the way the checklist generator expects.

    Basin dimensions come from the ``WxLxD`` part of the size part number.
    Basin light and drain button add-on kits are reduced to the
    ``BASIN_LIGHT`` / ``DRAIN_BUTTON`` markers that trigger hole checks, and
    configured sprayers add the ``SPRAYER`` feature.

    Args:
        build_number: Build number of the sink
        config: Stored sink configuration
        rules: Rule data override

    Returns:
        PreQcConfiguration for the build
    """
    rules = rules or load_rules()
    leg_id = config.actual_leg_type_id or ""
    leg_name = next((leg.name for leg in rules.legs if leg.id == leg_id), leg_id)
    feet = next((f for f in rules.feet if f.id == config.feet_type_id), None)

    basins = []
    for index, basin in enumerate(config.basins, start=1):
        kind = rules.basin_kind_for_kit(basin.basin_type_id)
        basins.append(
            PreQcBasin(
                position=index,
                type=kind.value if kind is not None else (basin.basin_type_id or ""),
                size=(basin.basin_size_part_number or "").replace("ASSY-", ""),
                addons=_addon_tokens(basin.addon_ids),
                dimensions=_size_dimensions(basin.basin_size_part_number),
            )
        )

    return PreQcConfiguration(
        build_number=build_number,
        sink_model=config.sink_model_id or "",
        dimensions=SinkDimensions(
            width=config.width or rules.pre_qc.default_sink_width,
            length=config.actual_length or 0,
        ),
        legs=StructuralPart(type_id=leg_id, name=leg_name, type="LEGS"),
        feet=StructuralPart(
            type_id=feet.id if feet else (config.feet_type_id or ""),
            name=feet.name if feet else "",
            type=feet.kind if feet else "",
        ),
        pegboard=config.pegboard,
        pegboard_type=config.pegboard_type or config.pegboard_type_id,
        basins=basins,
        additional_features=["SPRAYER"] if config.has_sprayers else [],
    )


def generate_pre_qc_checklist(
    build_number: str, config: SinkConfiguration, rules: Optional[CatalogRules] = None
) -> List[PreQcItem]:
    return PreQCTemplateGenerator(build_pre_qc_configuration(build_number, config, rules), rules).generate_checklist()
