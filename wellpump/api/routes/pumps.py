"""Pump catalog API routes (FastAPI).

Provides listing with one optional filter (search, GPM range or
efficiency range) and create/update/delete of pumps.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from ...core.catalog import PumpPatch, PumpSpec
from ...core.exceptions import ConstraintViolationError, MissingParameterError
from ..deps import get_pump_catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pumps", tags=["pumps"])


# ── Request models ───────────────────────────────────────────────────────

class PumpCreate(BaseModel):
    name: str = Field(..., min_length=1)
    gpm_value: int = Field(..., ge=0)
    efficiency_min: float
    efficiency_max: float
    image_path: Optional[str] = ""
    head_ft: Optional[float] = None


class PumpUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1)
    gpm_value: Optional[int] = Field(None, ge=0)
    efficiency_min: Optional[float] = None
    efficiency_max: Optional[float] = None
    image_path: Optional[str] = None
    head_ft: Optional[float] = None


def _pair_given(low, high, low_name: str, high_name: str) -> bool:
    """True when both bounds are given, False when neither is."""
    if low is None and high is None:
        return False
    if low is None or high is None:
        raise MissingParameterError(f"{low_name} and {high_name} must be given together")
    return True


# ── Routes ───────────────────────────────────────────────────────────────

@router.get("")
async def list_pumps(
    min_gpm: Optional[float] = Query(None, alias="minGPM"),
    max_gpm: Optional[float] = Query(None, alias="maxGPM"),
    min_efficiency: Optional[float] = Query(None, alias="minEfficiency"),
    max_efficiency: Optional[float] = Query(None, alias="maxEfficiency"),
    search: Optional[str] = Query(None),
    catalog=Depends(get_pump_catalog),
):
    """List pumps ascending by GPM.

    One filter applies, in this order of precedence: ``search``, the
    ``minGPM``/``maxGPM`` pair, the ``minEfficiency``/``maxEfficiency`` pair.
    """
    try:
        if search:
            pumps = catalog.search_pumps(search)
        elif _pair_given(min_gpm, max_gpm, "minGPM", "maxGPM"):
            pumps = catalog.get_pumps_by_gpm_range(min_gpm, max_gpm)
        elif _pair_given(min_efficiency, max_efficiency, "minEfficiency", "maxEfficiency"):
            pumps = catalog.get_pumps_by_efficiency_range(min_efficiency, max_efficiency)
        else:
            pumps = catalog.get_all_pumps()
    except MissingParameterError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.error(f"Error fetching pumps: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch pumps")

    return {"pumps": pumps}


@router.post("", status_code=201)
async def create_pump(
    data: PumpCreate,
    catalog=Depends(get_pump_catalog),
):
    """Create a new pump."""
    spec = PumpSpec(
        name=data.name,
        gpm_value=data.gpm_value,
        efficiency_min=data.efficiency_min,
        efficiency_max=data.efficiency_max,
        image_path=data.image_path or "",
        head_ft=data.head_ft,
    )
    try:
        pump_id = catalog.insert_pump(spec)
        pump = catalog.get_pump(pump_id)
    except ConstraintViolationError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except Exception as e:
        logger.error(f"Error creating pump: {e}")
        raise HTTPException(status_code=500, detail="Failed to create pump")

    return {"pump": pump}


@router.put("")
async def update_pump(
    data: PumpUpdate,
    catalog=Depends(get_pump_catalog),
):
    """Update any subset of a pump's fields; the body carries the pump ``id``."""
    if data.id is None:
        raise HTTPException(status_code=400, detail="Pump ID is required")

    patch = PumpPatch(**data.model_dump(exclude={"id"}))
    if patch.is_empty():
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        success = catalog.update_pump(data.id, patch)
        pump = catalog.get_pump(data.id) if success else None
    except ConstraintViolationError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except Exception as e:
        logger.error(f"Error updating pump {data.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update pump")

    if not success:
        raise HTTPException(status_code=404, detail="Pump not found")
    return {"pump": pump}


@router.delete("")
async def delete_pump(
    pump_id: Optional[int] = Query(None, alias="id"),
    catalog=Depends(get_pump_catalog),
):
    """Delete a pump by id."""
    if pump_id is None:
        raise HTTPException(status_code=400, detail="Pump ID is required")

    try:
        success = catalog.delete_pump(pump_id)
    except Exception as e:
        logger.error(f"Error deleting pump {pump_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete pump")

    if not success:
        raise HTTPException(status_code=404, detail="Pump not found")
    return {"message": "Pump deleted successfully"}
