"""Conjunctive filter over pump records.

Each criterion that is set contributes one independent predicate; a pump
is kept only when every active predicate holds. Input order is preserved.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

GPM_TOLERANCE = 5.0
HEAD_TOLERANCE_FT = 25.0

Predicate = Callable[[Dict], bool]


@dataclass
class FilterCriteria:
    gpm_min: Optional[float] = None
    gpm_max: Optional[float] = None
    efficiency_min: Optional[float] = None
    efficiency_max: Optional[float] = None
    target_gpm: Optional[float] = None       # matched within +/- GPM_TOLERANCE
    target_head: Optional[float] = None      # matched within +/- HEAD_TOLERANCE_FT
    search_text: Optional[str] = None
    show_images: bool = True                 # display only, never filters

    def predicates(self) -> List[Predicate]:
        preds: List[Predicate] = []

        if self.gpm_min is not None:
            preds.append(lambda p, lo=self.gpm_min: p["gpm_value"] >= lo)
        if self.gpm_max is not None:
            preds.append(lambda p, hi=self.gpm_max: p["gpm_value"] <= hi)
        if self.target_gpm is not None:
            preds.append(
                lambda p, t=self.target_gpm: abs(p["gpm_value"] - t) <= GPM_TOLERANCE
            )
        if self.efficiency_min is not None:
            preds.append(lambda p, lo=self.efficiency_min: p["efficiency_min"] >= lo)
        if self.efficiency_max is not None:
            preds.append(lambda p, hi=self.efficiency_max: p["efficiency_max"] <= hi)
        if self.target_head is not None:
            preds.append(lambda p, t=self.target_head: _head_within(p, t))
        if self.search_text:
            preds.append(lambda p, term=self.search_text.lower(): _text_match(p, term))

        return preds

    def is_default(self) -> bool:
        return not self.predicates()


def _head_within(pump: Dict, target_head: float) -> bool:
    # Pumps without a rated head cannot satisfy a head target
    head = pump.get("head_ft")
    if head is None:
        return False
    return abs(head - target_head) <= HEAD_TOLERANCE_FT


def _text_match(pump: Dict, term: str) -> bool:
    return term in pump["name"].lower() or term in str(pump["gpm_value"])


def apply_filters(pumps: Iterable[Dict], criteria: FilterCriteria) -> List[Dict]:
    """Pumps satisfying every active predicate of ``criteria``, in input order."""
    preds = criteria.predicates()
    return [p for p in pumps if all(pred(p) for pred in preds)]
