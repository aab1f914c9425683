"""Configurator service.

Pure lookups over the catalog rule data that feed the sink configuration
wizard: sink families and models, leg/feet kits, pegboard, basin, faucet and
sprayer options, and control box selection from the basin mix.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.enums import BasinKind

from .catalog import CatalogRules, load_rules

logger = get_logger(__name__)

_DIMENSIONS = re.compile(r"(\d+X\d+X\d+)")
_BASIN_KINDS = {kind.value for kind in BasinKind}


def _rules(rules: Optional[CatalogRules]) -> CatalogRules:
    return rules or load_rules()


def get_sink_families(rules: Optional[CatalogRules] = None) -> List[Dict[str, Any]]:
    return [family.model_dump() for family in _rules(rules).sink_families]


def get_sink_models(family: str = "MDRD", rules: Optional[CatalogRules] = None) -> List[Dict[str, Any]]:
    """Get the sink models of a family; families under construction have none."""
    return [model.model_dump() for model in _rules(rules).sink_models.get(family, [])]


def get_leg_types(rules: Optional[CatalogRules] = None) -> Dict[str, List[Dict[str, Any]]]:
    """Get leg kits split into height-adjustable and fixed-height groups."""
    rules = _rules(rules)
    grouped: Dict[str, List[Dict[str, Any]]] = {"height_adjustable": [], "fixed_height": []}
    for leg in rules.legs:
        adjustable = rules.is_height_adjustable(leg.id)
        grouped["height_adjustable" if adjustable else "fixed_height"].append(
            {
                "id": leg.id,
                "name": leg.name,
                "description": "Height adjustable leg system" if adjustable else "Fixed height leg system",
                "is_height_adjustable": adjustable,
                "available": True,
            }
        )
    return grouped


def get_feet_types(rules: Optional[CatalogRules] = None) -> List[Dict[str, Any]]:
    return [
        {"id": feet.id, "name": feet.name, "description": "Feet/caster option", "available": True}
        for feet in _rules(rules).feet
    ]


def get_pegboard_options(
    width: Optional[float] = None, length: Optional[float] = None, rules: Optional[CatalogRules] = None
) -> Dict[str, Any]:
    """Get pegboard types and colors.

    When ``length`` is given the size covering it is recommended together with
    the uncolored kit per pegboard type.

    Args:
        width: Sink width in inches, echoed back for display
        length: Sink length in inches
        rules: Rule data override

    Returns:
        Dict with ``types``, ``colors`` and optionally ``recommended``
    """
    pegboard = _rules(rules).pegboard
    options: Dict[str, Any] = {
        "types": [{"id": t.id, "name": t.name, "available": True} for t in pegboard.types],
        "colors": [{"id": color, "name": color.capitalize(), "available": True} for color in pegboard.colors],
    }
    if length:
        size = pegboard.size_for_length(length)
        options["recommended"] = {
            "width": width,
            "length": length,
            "size": size.size,
            "size_assembly_id": f"{pegboard.kit_prefix}{size.size}",
            "kits": {t.id: f"{pegboard.kit_prefix}{size.size}-{t.code}-KIT" for t in pegboard.types},
        }
    return options


def get_basin_type_options(rules: Optional[CatalogRules] = None) -> List[Dict[str, Any]]:
    return [
        {"id": basin.kind.value, "kit_id": basin.kit_id, "name": basin.name, "available": True}
        for basin in _rules(rules).basin_types
    ]


def parse_basin_dimensions(size_id: str) -> Optional[str]:
    """Extract ``WxLxD`` from a basin size id such as ``ASSY-T2-ADW-BASIN24X20X8``."""
    match = _DIMENSIONS.search(size_id)
    return match.group(1) if match else None


def get_basin_size_options(rules: Optional[CatalogRules] = None) -> Dict[str, Any]:
    rules = _rules(rules)
    return {
        "standard_sizes": [
            {
                "id": size_id,
                "assembly_id": size_id,
                "dimensions": parse_basin_dimensions(size_id) or "Standard",
                "is_custom": False,
                "available": True,
            }
            for size_id in rules.basin_sizes
        ],
        "custom_size_allowed": True,
        "custom_size_prefix": rules.basin_custom_size_prefix,
    }


def get_basin_addon_options(rules: Optional[CatalogRules] = None) -> List[Dict[str, Any]]:
    return [
        {
            "id": addon.id,
            "name": addon.name,
            "description": f"Basin addon - {addon.subcategory_code}",
            "available": True,
        }
        for addon in _rules(rules).basin_addons
    ]


def get_faucet_type_options(basin_type: str = "", rules: Optional[CatalogRules] = None) -> List[Dict[str, Any]]:
    """Get faucet kits; the DI gooseneck is the default for E-Sink DI basins."""
    rules = _rules(rules)
    return [
        {
            "id": faucet.id,
            "assembly_id": faucet.id,
            "name": faucet.name,
            "is_default": basin_type == BasinKind.E_SINK_DI.value and faucet.id == rules.di_faucet,
            "available": True,
        }
        for faucet in rules.faucets
    ]


def get_sprayer_type_options(rules: Optional[CatalogRules] = None) -> List[Dict[str, Any]]:
    return [
        {"id": sprayer.id, "assembly_id": sprayer.id, "name": sprayer.name, "available": True}
        for sprayer in _rules(rules).sprayers
    ]


def _basin_kind(basin: Mapping[str, Any], rules: CatalogRules) -> Optional[BasinKind]:
    for key in ("basinType", "basin_type", "basinTypeId", "basin_type_id"):
        value = basin.get(key)
        if not value:
            continue
        if value in _BASIN_KINDS:
            return BasinKind(value)
        kind = rules.basin_kind_for_kit(value)
        if kind is not None:
            return kind
    return None


def count_basin_kinds(basins: Sequence[Mapping[str, Any]], rules: Optional[CatalogRules] = None) -> Tuple[int, int]:
    """Count E-Drain and E-Sink basins; E-Sink DI counts as an E-Sink.

    Each basin may name its kind (``E_DRAIN``) or its kit (``T2-BSN-EDR-KIT``).

    Returns:
        Tuple of (E-Drain count, E-Sink count)
    """
    rules = _rules(rules)
    e_drain = e_sink = 0
    for basin in basins:
        kind = _basin_kind(basin, rules)
        if kind is BasinKind.E_DRAIN:
            e_drain += 1
        elif kind in (BasinKind.E_SINK, BasinKind.E_SINK_DI):
            e_sink += 1
    return e_drain, e_sink


def get_control_box(
    basin_configurations: Sequence[Mapping[str, Any]], rules: Optional[CatalogRules] = None
) -> Optional[Dict[str, Any]]:
    """Select the control box for a basin mix.

    Args:
        basin_configurations: Basins, each naming its kind or kit
        rules: Rule data override

    Returns:
        Control box description, or None when there are no basins or no box
        matches the counts
    """
    if not basin_configurations:
        return None
    rules = _rules(rules)
    e_drain, e_sink = count_basin_kinds(basin_configurations, rules)
    box = rules.control_box_for_counts(e_drain, e_sink)
    if box is None:
        logger.warning(f"No control box defined for {e_drain} E-Drain and {e_sink} E-Sink basins")
        return None
    return {
        "control_box_id": box.id,
        "name": box.name,
        "basin_configuration": {"e_drain_count": e_drain, "e_sink_count": e_sink},
        "mapping_rule": f"{e_drain} E-Drain + {e_sink} E-Sink basins",
    }


def get_all_options(rules: Optional[CatalogRules] = None) -> Dict[str, Any]:
    rules = _rules(rules)
    return {
        "sink_families": get_sink_families(rules),
        "sink_models": get_sink_models("MDRD", rules),
        "leg_types": get_leg_types(rules),
        "feet_types": get_feet_types(rules),
        "pegboard_options": get_pegboard_options(rules=rules),
        "basin_types": get_basin_type_options(rules),
        "basin_sizes": get_basin_size_options(rules),
        "basin_addons": get_basin_addon_options(rules),
        "faucet_types": get_faucet_type_options(rules=rules),
        "sprayer_types": get_sprayer_type_options(rules),
    }
