"""Selection service: ties the catalog, filters, matcher and advisor together."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..advisor import AdvisorResult, PumpAdvisor
from ..catalog import PumpCatalog
from .filters import FilterCriteria, apply_filters
from .hydraulics import HydraulicInputs
from .matcher import find_bracketing_pumps

logger = logging.getLogger(__name__)


@dataclass
class SelectionResult:
    total_head: float
    pumps: List[Dict] = field(default_factory=list)
    advice: Optional[AdvisorResult] = None

    def to_dict(self) -> dict:
        recommendation = None
        error = None
        if self.advice is not None:
            if self.advice.ok:
                recommendation = self.advice.recommendation.to_dict()
            else:
                error = self.advice.error
        return {
            "total_head": round(self.total_head, 2),
            "pumps": self.pumps,
            "recommendation": recommendation,
            "recommendation_error": error,
        }


class SelectionService:
    """Serves candidate pumps, filtered lists and bracketing selections.

    Keeps an in-memory copy of the last catalog read and falls back to it
    when the database cannot be reached.
    """

    def __init__(self, catalog: PumpCatalog, advisor: Optional[PumpAdvisor] = None):
        self.catalog = catalog
        self.advisor = advisor or PumpAdvisor()
        self._mirror: List[Dict] = []

    @property
    def mirror(self) -> List[Dict]:
        return list(self._mirror)

    def candidates(self) -> List[Dict]:
        """All pumps ascending by flow; the in-memory copy if the store fails."""
        try:
            pumps = self.catalog.get_all_pumps()
        except SQLAlchemyError as e:
            logger.warning(
                f"Catalog unavailable, serving {len(self._mirror)} cached pumps: {e}"
            )
            return list(self._mirror)

        self._mirror = list(pumps)
        return pumps

    def filter_pumps(self, criteria: FilterCriteria) -> List[Dict]:
        pumps = apply_filters(self.candidates(), criteria)
        logger.debug(f"Filter kept {len(pumps)} pumps")
        return pumps

    def select(self, inputs: HydraulicInputs, recommend: bool = True) -> SelectionResult:
        """Bracketing pumps for the target flow, with an optional LLM pick."""
        head = inputs.total_head
        bracket = find_bracketing_pumps(self.candidates(), inputs.target_gpm)
        result = SelectionResult(total_head=head, pumps=bracket)

        if not recommend:
            return result

        if len(bracket) < 2:
            result.advice = AdvisorResult.failure("Fewer than two candidate pumps")
        else:
            result.advice = self.advisor.recommend(
                bracket[0], bracket[1], head, inputs.target_gpm
            )
        return result
