"""
Catalog rule engine.

- catalog.py: packaged rule data and its pydantic models
- configurator.py: option lookups for the configuration wizard
- bom.py: BOM generation from sink configurations
- pre_qc.py: Pre-QC checklist generation
- procurement.py: legs/feet extraction for outsourced part tracking
- transitions.py: order and task status transition tables
"""

from .bom import BomGenerator, BomLine, BomResult, CatalogLookup, FlatBomLine, flatten_bom
from .catalog import CatalogRules, load_rules, parse_rules
from .pre_qc import PreQCTemplateGenerator, build_pre_qc_configuration, generate_pre_qc_checklist

__all__ = [
    "BomGenerator",
    "BomLine",
    "BomResult",
    "CatalogLookup",
    "FlatBomLine",
    "flatten_bom",
    "CatalogRules",
    "load_rules",
    "parse_rules",
    "PreQCTemplateGenerator",
    "build_pre_qc_configuration",
    "generate_pre_qc_checklist",
]
