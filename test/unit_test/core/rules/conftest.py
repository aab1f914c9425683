"""Fixtures for the rule engine tests: an in-memory catalog for BOM generation."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

from cleanstation.core.database.entities.catalog import Assembly, AssemblyComponent, Part
from cleanstation.core.models.domain.enums import AssemblyType
from cleanstation.core.rules import load_rules


class InMemoryCatalog:
    """Dict-backed stand-in for ``SqlCatalog``."""

    def __init__(self) -> None:
        self.parts: Dict[str, Part] = {}
        self.assemblies: Dict[str, Assembly] = {}
        self.components: Dict[str, List[AssemblyComponent]] = {}
        self._next_link_id = 1

    def add_part(self, part_id: str, name: Optional[str] = None) -> Part:
        part = Part(part_id=part_id, name=name or part_id)
        self.parts[part_id] = part
        return part

    def add_assembly(
        self,
        assembly_id: str,
        name: Optional[str] = None,
        type: AssemblyType = AssemblyType.KIT,
        parts: Iterable[Tuple[str, int]] = (),
        children: Iterable[Tuple[str, int]] = (),
    ) -> Assembly:
        assembly = Assembly(assembly_id=assembly_id, name=name or assembly_id, type=type)
        self.assemblies[assembly_id] = assembly
        links = self.components.setdefault(assembly_id, [])
        for part_id, quantity in parts:
            links.append(self._link(assembly_id, quantity, child_part_id=part_id))
        for child_id, quantity in children:
            links.append(self._link(assembly_id, quantity, child_assembly_id=child_id))
        return assembly

    def _link(self, parent: str, quantity: int, **child: str) -> AssemblyComponent:
        link = AssemblyComponent(id=self._next_link_id, parent_assembly_id=parent, quantity=quantity, **child)
        self._next_link_id += 1
        return link

    async def get_assembly(self, assembly_id: str) -> Optional[Assembly]:
        return self.assemblies.get(assembly_id)

    async def get_part(self, part_id: str) -> Optional[Part]:
        return self.parts.get(part_id)

    async def get_components(self, assembly_id: str) -> Sequence[AssemblyComponent]:
        return self.components.get(assembly_id, [])


@pytest.fixture
def rules():
    return load_rules()


@pytest.fixture
def catalog(rules) -> InMemoryCatalog:
    """Catalog holding every kit the rule data references plus the control box parts."""
    catalog = InMemoryCatalog()
    for kit_id in rules.manual_kits.values():
        catalog.add_assembly(kit_id)
    for body in rules.sink_bodies:
        catalog.add_assembly(body.id, type=AssemblyType.COMPLEX)
    for kit in list(rules.legs) + list(rules.feet) + list(rules.faucets) + list(rules.sprayers):
        catalog.add_assembly(kit.id)
    for basin in rules.basin_types:
        catalog.add_assembly(basin.kit_id)
    for size_id in rules.basin_sizes:
        catalog.add_assembly(size_id, type=AssemblyType.SIMPLE)
    for addon in rules.basin_addons:
        catalog.add_assembly(addon.id)
    catalog.add_assembly(rules.pegboard.mandatory_kit)
    catalog.add_assembly(rules.pegboard.color_component)
    for size in rules.pegboard.sizes:
        for pegboard_type in rules.pegboard.types:
            catalog.add_assembly(f"{rules.pegboard.kit_prefix}{size.size}-{pegboard_type.code}-KIT")
    recipe = rules.control_box_recipe
    for part_id in recipe.base + recipe.per_e_drain + recipe.per_e_sink + recipe.per_board + [recipe.bracket]:
        catalog.add_part(part_id)
    for box in rules.control_boxes:
        catalog.add_assembly(box.id, box.name, type=AssemblyType.COMPLEX)
    return catalog
