"""
Pump selection module.

Exports:
- total_head, HydraulicInputs: derived head calculation
- find_bracketing_pumps: pumps just below/above a target flow
- FilterCriteria, apply_filters: conjunctive record filter
- SelectionService, SelectionResult: request-level orchestration
"""

from .filters import GPM_TOLERANCE, HEAD_TOLERANCE_FT, FilterCriteria, apply_filters
from .hydraulics import PSI_TO_FEET, HydraulicInputs, total_head
from .matcher import find_bracketing_pumps
from .service import SelectionResult, SelectionService

__all__ = [
    "PSI_TO_FEET",
    "total_head",
    "HydraulicInputs",
    "find_bracketing_pumps",
    "GPM_TOLERANCE",
    "HEAD_TOLERANCE_FT",
    "FilterCriteria",
    "apply_filters",
    "SelectionService",
    "SelectionResult",
]
