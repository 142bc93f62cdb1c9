"""
Pump catalog module.

Exports:
- PumpCatalog: CRUD and query operations over the pumps table
- PumpSpec, PumpPatch: typed insert / partial-update payloads
- seed_catalog, load_seed_file, parse_seed_document: seed document loading
"""

from .models import PumpPatch, PumpSpec
from .pump_catalog import PumpCatalog
from .seed import load_seed_file, parse_seed_document, seed_catalog

__all__ = [
    "PumpCatalog",
    "PumpSpec",
    "PumpPatch",
    "seed_catalog",
    "load_seed_file",
    "parse_seed_document",
]
