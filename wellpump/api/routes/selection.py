"""Pump selection API routes (FastAPI).

Total head calculation, filtered candidate lists and the bracketing
selection with an optional LLM recommendation.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from ...core.selection import FilterCriteria, HydraulicInputs, total_head
from ..deps import get_selection_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/selection", tags=["selection"])


# ── Request models ───────────────────────────────────────────────────────

class SelectionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pressure: float = Field(60.0, description="Required pressure [PSI]")
    static_water_level: float = Field(100.0, description="Static water level [ft]")
    pump_setting_depth: float = Field(7.0, description="Pump setting depth [ft]")
    target_gpm: float = Field(..., ge=0, description="Required flow [GPM]")
    recommend: bool = True


class FilterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    gpm_min: Optional[float] = None
    gpm_max: Optional[float] = None
    efficiency_min: Optional[float] = None
    efficiency_max: Optional[float] = None
    target_gpm: Optional[float] = None
    target_head: Optional[float] = None
    search_text: Optional[str] = None
    show_images: bool = True

    def to_criteria(self) -> FilterCriteria:
        return FilterCriteria(**self.model_dump())


# ── Routes ───────────────────────────────────────────────────────────────

@router.get("/head")
async def get_total_head(
    pressure: float = Query(...),
    static_water_level: float = Query(...),
    pump_setting_depth: float = Query(...),
):
    """Total head [ft] = pressure x 2.31 + static water level + setting depth."""
    head = total_head(pressure, static_water_level, pump_setting_depth)
    return {"total_head": round(head, 2)}


@router.post("")
def select_pumps(
    data: SelectionRequest,
    service=Depends(get_selection_service),
):
    """Bracketing pumps for the requested flow, plus the LLM's pick.

    A missing recommendation is not an error: ``recommendation`` is null and
    ``recommendation_error`` says why.
    """
    inputs = HydraulicInputs(
        pressure=data.pressure,
        static_water_level=data.static_water_level,
        pump_setting_depth=data.pump_setting_depth,
        target_gpm=data.target_gpm,
    )
    try:
        result = service.select(inputs, recommend=data.recommend)
    except Exception as e:
        logger.error(f"Error selecting pumps for {data.target_gpm} GPM: {e}")
        raise HTTPException(status_code=500, detail="Failed to select pumps")

    return result.to_dict()


@router.post("/filter")
def filter_pumps(
    data: FilterRequest,
    service=Depends(get_selection_service),
):
    """Pumps matching every supplied criterion, ascending by GPM."""
    criteria = data.to_criteria()
    try:
        pumps = service.filter_pumps(criteria)
    except Exception as e:
        logger.error(f"Error filtering pumps: {e}")
        raise HTTPException(status_code=500, detail="Failed to filter pumps")

    return {"pumps": pumps, "show_images": criteria.show_images}
