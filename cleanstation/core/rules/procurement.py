"""Procurement extraction.

Legs and feet kits are shipped to the sink body manufacturer before assembly.
These helpers pick them out of an order's BOM (or, when no BOM was generated
yet, out of its sink configurations), merge them with the parts already being
tracked and summarise where they are.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from cleanstation.core.models.domain.enums import OutsourcedPartStatus

from .catalog import CatalogRules, load_rules


def _category(item_id: str, rules: CatalogRules) -> Optional[str]:
    if item_id in rules.procurement.legs:
        return "LEGS"
    if item_id in rules.procurement.feet:
        return "FEET"
    return None


def extract_legs_and_feet(
    bom_lines: Iterable[Mapping[str, Any]], rules: Optional[CatalogRules] = None
) -> List[Dict[str, Any]]:
    """Pick the legs and feet kits out of flattened BOM lines.

    Args:
        bom_lines: Flattened BOM lines with ``id``, ``name`` and ``quantity``
        rules: Rule data override

    Returns:
        List of ``{id, part_number, part_name, quantity, category, source}``
    """
    rules = rules or load_rules()
    parts = []
    for line in bom_lines:
        item_id = line.get("id") or line.get("item_id") or ""
        category = _category(item_id, rules)
        if category is None:
            continue
        parts.append(
            {
                "id": item_id,
                "part_number": item_id,
                "part_name": line.get("name") or item_id,
                "quantity": int(line.get("quantity") or 1),
                "category": category,
                "source": "BOM",
            }
        )
    return parts


def extract_from_configurations(
    configurations: Mapping[str, Mapping[str, Any]], rules: Optional[CatalogRules] = None
) -> List[Dict[str, Any]]:
    """Derive legs and feet kits from stored sink configurations, one kit per build."""
    rules = rules or load_rules()
    names = {kit.id: kit.name for kit in list(rules.legs) + list(rules.feet)}
    counts: Dict[str, int] = {}
    for config in configurations.values():
        for key in ("legsTypeId", "legs_type_id", "legTypeId", "leg_type_id", "feetTypeId", "feet_type_id"):
            kit_id = config.get(key)
            if kit_id and _category(kit_id, rules):
                counts[kit_id] = counts.get(kit_id, 0) + 1
    return [
        {
            "id": kit_id,
            "part_number": kit_id,
            "part_name": names.get(kit_id, kit_id),
            "quantity": quantity,
            "category": _category(kit_id, rules),
            "source": "CONFIGURATION",
        }
        for kit_id, quantity in counts.items()
    ]


def merge_parts(extracted: List[Dict[str, Any]], tracked: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Overlay tracked outsourced part records on the extracted kits.

    Extracted kits start as PENDING; a tracked record with the same part
    number overrides them. Tracked parts with no extracted counterpart are
    kept as well.
    """
    merged: Dict[str, Dict[str, Any]] = {}
    for part in extracted:
        merged[part["part_number"]] = {**part, "status": OutsourcedPartStatus.PENDING.value}
    for record in tracked:
        number = record["part_number"]
        merged[number] = {**merged.get(number, {}), **{k: v for k, v in record.items() if v is not None}}
    return list(merged.values())


def summarize(parts: Iterable[Mapping[str, Any]]) -> Dict[str, int]:
    counts = {"total": 0, "sent": 0, "received": 0, "pending": 0}
    for part in parts:
        if part.get("category") not in ("LEGS", "FEET"):
            continue
        counts["total"] += 1
        status = part.get("status")
        if status == OutsourcedPartStatus.SENT.value:
            counts["sent"] += 1
        elif status == OutsourcedPartStatus.RECEIVED.value:
            counts["received"] += 1
        elif not status or status == OutsourcedPartStatus.PENDING.value:
            counts["pending"] += 1
    return counts


def milestone_for(event: str, rules: Optional[CatalogRules] = None) -> Optional[str]:
    """Get the procurement milestone reached by ``event`` (e.g. PARTS_SENT)."""
    return (rules or load_rules()).procurement.milestones.get(event)


def milestone_event(status: OutsourcedPartStatus) -> Optional[str]:
    if status is OutsourcedPartStatus.SENT:
        return "PARTS_SENT"
    if status is OutsourcedPartStatus.RECEIVED:
        return "PARTS_RECEIVED"
    return None


def procurement_needed(parts: Iterable[Mapping[str, Any]]) -> bool:
    return any(part.get("category") in ("LEGS", "FEET") for part in parts)
