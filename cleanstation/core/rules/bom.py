"""BOM generation.

Turns an order's sink configurations into a bill of materials. Every
configured option maps to a catalog kit or assembly through the rule data,
and each assembly is expanded recursively through its component list.

Catalog access goes through the async ``CatalogLookup`` protocol so the
generator runs against the database (``SqlCatalog``) as well as against an
in-memory catalog in tests.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Protocol, Sequence, Tuple

from cleanstation.core.errors import BomGenerationError
from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.configuration import OrderData, SinkConfiguration
from cleanstation.core.models.domain.enums import BasinKind, PartType

from .catalog import CatalogRules, ControlBoxRule, load_rules

logger = get_logger(__name__)


class CatalogLookup(Protocol):
    """Async catalog access needed by the generator."""

    async def get_assembly(self, assembly_id: str) -> Optional[Any]: ...

    async def get_part(self, part_id: str) -> Optional[Any]: ...

    async def get_components(self, assembly_id: str) -> Sequence[Any]: ...


def _type_name(value: Any) -> str:
    return getattr(value, "value", value)


@dataclass
class BomLine:
    """One node of the hierarchical BOM."""

    id: str
    name: str
    quantity: int
    category: str
    type: str
    components: List["BomLine"] = field(default_factory=list)
    is_placeholder: bool = False
    is_custom: bool = False
    build_number: Optional[str] = None

    def to_dict(self, nested: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "build_number": self.build_number,
            "name": self.name,
            "quantity": self.quantity,
            "category": self.category,
            "type": self.type,
            "is_placeholder": self.is_placeholder,
            "is_custom": self.is_custom,
        }
        if nested:
            data["components"] = [child.to_dict() for child in self.components]
        return data


@dataclass
class FlatBomLine:
    line: BomLine
    indent_level: int

    @property
    def is_child(self) -> bool:
        return self.indent_level > 0

    def to_dict(self) -> Dict[str, Any]:
        data = self.line.to_dict(nested=False)
        data["has_children"] = bool(self.line.components)
        data["is_child"] = self.is_child
        data["indent_level"] = self.indent_level
        return data


@dataclass
class BomResult:
    hierarchical: List[BomLine]
    flattened: List[FlatBomLine]

    @property
    def total_items(self) -> int:
        return len(self.flattened)

    @property
    def top_level_items(self) -> int:
        return len(self.hierarchical)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hierarchical": [line.to_dict() for line in self.hierarchical],
            "flattened": [line.to_dict() for line in self.flattened],
            "total_items": self.total_items,
            "top_level_items": self.top_level_items,
        }


def _tag_build(lines: Sequence[BomLine], build_number: str) -> None:
    for line in lines:
        line.build_number = build_number
        _tag_build(line.components, build_number)


def flatten_bom(lines: Sequence[BomLine], level: int = 0) -> List[FlatBomLine]:
    """Depth-first flattening that keeps each node's depth."""
    flat: List[FlatBomLine] = []
    for line in lines:
        flat.append(FlatBomLine(line=line, indent_level=level))
        flat.extend(flatten_bom(line.components, level + 1))
    return flat


def is_configuration_complete(config: SinkConfiguration, rules: CatalogRules) -> bool:
    """A control box is only selected once the basin layout is fully known."""
    if not config.sink_model_id or not config.basins:
        return False
    if not all(basin.basin_type_id and basin.basin_type_id != "undefined" for basin in config.basins):
        return False
    return len(config.basins) >= rules.expected_basin_count(config.sink_model_id)


def auto_control_box(config: SinkConfiguration, rules: CatalogRules) -> Optional[ControlBoxRule]:
    e_drain = e_sink = 0
    for basin in config.basins:
        kind = rules.basin_kind_for_kit(basin.basin_type_id)
        if kind is BasinKind.E_DRAIN:
            e_drain += 1
        elif kind in (BasinKind.E_SINK, BasinKind.E_SINK_DI):
            e_sink += 1
    box = rules.control_box_for_counts(e_drain, e_sink)
    if box is None:
        logger.warning(f"No control box defined for {e_drain} E-Drains and {e_sink} E-Sinks")
    return box


def control_box_components(box: ControlBoxRule, rules: CatalogRules) -> List[Tuple[str, int]]:
    """Get the (part id, quantity) recipe of a control box.

    Every box carries the base parts; each E-Drain and E-Sink adds its board
    and module, the per-board parts scale with the total board count, and the
    upgrade bracket is added for two boards of one kind or more than two boards.
    """
    recipe = rules.control_box_recipe
    boards = box.e_drain + box.e_sink
    components = [(part_id, 1) for part_id in recipe.base]
    if box.e_drain:
        components += [(part_id, box.e_drain) for part_id in recipe.per_e_drain]
    if box.e_sink:
        components += [(part_id, box.e_sink) for part_id in recipe.per_e_sink]
    components += [(part_id, boards) for part_id in recipe.per_board]
    if box.e_drain >= 2 or box.e_sink >= 2 or boards > 2:
        components.append((recipe.bracket, 1))
    return components


class BomGenerator:
    """Generate the BOM of an order from its sink configurations."""

    def __init__(self, catalog: CatalogLookup, rules: Optional[CatalogRules] = None):
        self.catalog = catalog
        self.rules = rules or load_rules()

    async def generate(self, order: OrderData) -> BomResult:
        """Build the hierarchical and flattened BOM.

        Args:
            order: Language, build numbers, configurations and accessories

        Returns:
            BomResult with both views of the BOM

        Raises:
            BomGenerationError: When a configuration cannot be mapped, e.g. a
                sink length outside the supported range
        """
        logger.info(f"Generating BOM for builds {order.build_numbers}")
        try:
            bom: List[BomLine] = []
            await self._add_assembly(self.rules.manual_kit(order.customer.language), 1, "SYSTEM", bom)

            for build_number in order.build_numbers:
                config = order.configurations.get(build_number)
                if config is None:
                    logger.warning(f"No configuration for build number {build_number}")
                    continue
                start = len(bom)
                await self._add_build(config, bom)
                _tag_build(bom[start:], build_number)

            for build_number in order.build_numbers:
                start = len(bom)
                for accessory in order.accessories.get(build_number, []):
                    if accessory.assembly_id and accessory.quantity > 0:
                        await self._add_assembly(accessory.assembly_id, accessory.quantity, "ACCESSORY", bom)
                _tag_build(bom[start:], build_number)
        except BomGenerationError:
            raise
        except Exception as exc:
            logger.error(f"BOM generation failed: {exc}", exc_info=True)
            raise BomGenerationError(f"BOM generation failed: {exc}") from exc

        flattened = flatten_bom(bom)
        logger.info(f"Generated BOM with {len(bom)} top-level items and {len(flattened)} lines")
        return BomResult(hierarchical=bom, flattened=flattened)

    async def _add_build(self, config: SinkConfiguration, bom: List[BomLine]) -> None:
        length = config.actual_length
        if length:
            minimum = self.rules.sink_bodies[0].min_length
            if length < minimum:
                raise BomGenerationError(f'Sink length must be at least {minimum}". Current length: {length}"')
            body = self.rules.sink_body_for_length(length)
            if body is None:
                raise BomGenerationError(
                    f'No sink body assembly available for length: {length}". Supported range: 48"-120"'
                )
            await self._add_assembly(body.id, 1, "SINK_BODY", bom)

        if config.actual_leg_type_id:
            await self._add_assembly(config.actual_leg_type_id, 1, "LEGS", bom)
        if config.feet_type_id:
            await self._add_assembly(config.feet_type_id, 1, "FEET", bom)

        if config.pegboard:
            await self._add_pegboard(config, bom)

        for drawer_id in config.drawers_and_compartments:
            await self._add_assembly(drawer_id, 1, "DRAWER_COMPARTMENT", bom)

        await self._add_basins(config, bom)

        if is_configuration_complete(config, self.rules):
            await self._add_control_box(config, bom)

        await self._add_faucets(config, bom)
        await self._add_sprayers(config, bom)

    async def _add_pegboard(self, config: SinkConfiguration, bom: List[BomLine]) -> None:
        pegboard = self.rules.pegboard
        length = config.actual_length
        await self._add_assembly(pegboard.mandatory_kit, 1, "PEGBOARD_MANDATORY", bom)

        if config.specific_pegboard_kit_id:
            await self._add_assembly(config.specific_pegboard_kit_id, 1, "PEGBOARD_SPECIFIC_KIT", bom)
        elif config.pegboard_type and length:
            kit_id = self._pegboard_kit_id(length, config.pegboard_type, config.pegboard_color)
            category = "PEGBOARD_COLORED_KIT" if config.pegboard_color else "PEGBOARD_SIZE_KIT"
            await self._add_assembly(kit_id, 1, category, bom)
        elif config.pegboard_type_id and length:
            kit_id = self._pegboard_kit_id(length, config.pegboard_type_id)
            await self._add_assembly(kit_id, 1, "PEGBOARD_LEGACY_SIZE", bom)

        colored_kit = bool(config.pegboard_type and config.pegboard_color and length)
        if config.pegboard_color and not config.specific_pegboard_kit_id and not colored_kit:
            await self._add_assembly(pegboard.color_component, 1, "PEGBOARD_COLOR", bom)

        if not (config.pegboard_type or config.pegboard_type_id) or config.specific_pegboard_kit_id:
            return
        size_part = config.pegboard_size_part_number
        if size_part:
            if size_part.startswith(pegboard.custom_size_prefix):
                suffix = size_part[len(pegboard.custom_size_prefix) :]
                await self._add_custom_part(size_part, f"Custom Pegboard Panel {suffix}", "PEGBOARD_PANEL", bom)
            else:
                await self._add_assembly(size_part, 1, "PEGBOARD_SIZE", bom)
        elif length and not config.pegboard_type:
            size = pegboard.covering_size(length)
            if size is not None:
                await self._add_assembly(f"{pegboard.kit_prefix}{size.size}", 1, "PEGBOARD_SIZE_AUTO", bom)

    def _pegboard_kit_id(self, length: float, pegboard_type: str, color: Optional[str] = None) -> str:
        pegboard = self.rules.pegboard
        size = pegboard.size_for_length(length)
        type_code = pegboard.type_code(pegboard_type)
        if color and color.strip():
            return f"{pegboard.kit_prefix}{size.size}-{color.strip().upper()}-{type_code}-KIT"
        return f"{pegboard.kit_prefix}{size.size}-{type_code}-KIT"

    async def _add_basins(self, config: SinkConfiguration, bom: List[BomLine]) -> None:
        type_counts = Counter(basin.basin_type_id for basin in config.basins if basin.basin_type_id)
        for kit_id, count in type_counts.items():
            await self._add_assembly(kit_id, count, "BASIN_TYPE_KIT", bom)

        prefix = self.rules.basin_custom_size_prefix
        for basin in config.basins:
            size_part = basin.basin_size_part_number
            if size_part and size_part.startswith(prefix):
                await self._add_custom_part(size_part, f"Custom Basin {size_part[len(prefix):]}", "BASIN_PANEL", bom)
            elif size_part:
                await self._add_assembly(size_part, 1, "BASIN_SIZE_ASSEMBLY", bom)
            for addon_id in basin.addon_ids:
                await self._add_assembly(addon_id, 1, "BASIN_ADDON", bom)

    async def _add_control_box(self, config: SinkConfiguration, bom: List[BomLine]) -> None:
        if config.control_box_id:
            box = self.rules.control_box(config.control_box_id)
            if box is None:
                await self._add_assembly(config.control_box_id, 1, "CONTROL_BOX", bom)
                return
        else:
            box = auto_control_box(config, self.rules)
            if box is None:
                return

        assembly = await self.catalog.get_assembly(box.id)
        if assembly is None:
            logger.warning(f"Control box {box.id} not found in catalog")
            bom.append(
                BomLine(
                    id=box.id,
                    name=f"Unknown Control Box: {box.id}",
                    quantity=1,
                    category="CONTROL_BOX",
                    type="UNKNOWN",
                    is_placeholder=True,
                )
            )
            return

        line = BomLine(
            id=assembly.assembly_id,
            name=assembly.name,
            quantity=1,
            category="CONTROL_BOX",
            type=_type_name(assembly.type),
        )
        for part_id, quantity in control_box_components(box, self.rules):
            part = await self.catalog.get_part(part_id)
            if part is not None:
                line.components.append(
                    BomLine(
                        id=part.part_id,
                        name=part.name,
                        quantity=quantity,
                        category="PART",
                        type=_type_name(part.type),
                    )
                )
            elif await self.catalog.get_assembly(part_id) is not None:
                await self._add_assembly(part_id, quantity, "SUB_ASSEMBLY", line.components, frozenset({box.id}))
            else:
                logger.warning(f"Control box component {part_id} not found as part or assembly")
        bom.append(line)

    async def _add_faucets(self, config: SinkConfiguration, bom: List[BomLine]) -> None:
        di_kit = next((b.kit_id for b in self.rules.basin_types if b.kind is BasinKind.E_SINK_DI), None)
        di_basins = sum(1 for basin in config.basins if di_kit and basin.basin_type_id == di_kit)
        if di_basins:
            await self._add_assembly(self.rules.di_faucet, di_basins, "FAUCET_AUTO", bom)

        if config.faucets:
            for faucet in config.faucets:
                await self._add_assembly(faucet.faucet_type_id, 1, "FAUCET_KIT", bom)
        elif config.faucet_type_id:
            await self._add_assembly(config.faucet_type_id, config.faucet_quantity or 1, "FAUCET_KIT", bom)

    async def _add_sprayers(self, config: SinkConfiguration, bom: List[BomLine]) -> None:
        if config.sprayers:
            for sprayer in config.sprayers:
                await self._add_assembly(sprayer.sprayer_type_id, 1, "SPRAYER_KIT", bom)
        elif config.sprayer:
            for sprayer_id in config.sprayer_type_ids:
                await self._add_assembly(sprayer_id, 1, "SPRAYER_KIT", bom)

    async def _add_custom_part(self, part_id: str, default_name: str, category: str, bom: List[BomLine]) -> None:
        part = await self.catalog.get_part(part_id)
        bom.append(
            BomLine(
                id=part_id,
                name=part.name if part is not None else default_name,
                quantity=1,
                category=category,
                type=_type_name(part.type) if part is not None else PartType.CUSTOM_PART_AUTOGEN.value,
                is_custom=True,
            )
        )

    async def _add_assembly(
        self,
        assembly_id: str,
        quantity: int,
        category: str,
        bom: List[BomLine],
        ancestors: FrozenSet[str] = frozenset(),
    ) -> None:
        """Append an assembly and its expanded components to ``bom``.

        ``ancestors`` holds the assembly ids on the current branch; an assembly
        that contains itself is not expanded again.
        """
        if assembly_id in ancestors:
            logger.warning(f"Skipping {assembly_id}: assembly cycle detected")
            return
        ancestors = ancestors | {assembly_id}

        assembly = await self.catalog.get_assembly(assembly_id)
        if assembly is None:
            logger.warning(f"Assembly {assembly_id} not found in catalog")
            bom.append(
                BomLine(
                    id=assembly_id,
                    name=f"Unknown Assembly: {assembly_id}",
                    quantity=quantity,
                    category=category or "UNKNOWN",
                    type="UNKNOWN",
                    is_placeholder=True,
                )
            )
            return

        line = BomLine(
            id=assembly.assembly_id,
            name=assembly.name,
            quantity=quantity,
            category=category or _type_name(assembly.type),
            type=_type_name(assembly.type),
        )
        for link in await self.catalog.get_components(assembly_id):
            child_quantity = link.quantity * quantity
            if link.child_assembly_id:
                await self._add_assembly(
                    link.child_assembly_id, child_quantity, "SUB_ASSEMBLY", line.components, ancestors
                )
                continue
            part = await self.catalog.get_part(link.child_part_id) if link.child_part_id else None
            if part is None:
                line.components.append(
                    BomLine(
                        id=f"UNKNOWN_COMPONENT_{link.id}",
                        name="Unknown Component",
                        quantity=link.quantity,
                        category="UNKNOWN",
                        type="UNKNOWN_TYPE",
                        is_placeholder=True,
                    )
                )
            elif await self.catalog.get_assembly(part.part_id) is not None:
                await self._add_assembly(part.part_id, child_quantity, "SUB_ASSEMBLY", line.components, ancestors)
            else:
                line.components.append(
                    BomLine(
                        id=part.part_id,
                        name=part.name,
                        quantity=child_quantity,
                        category="PART",
                        type=_type_name(part.type),
                    )
                )
        bom.append(line)
