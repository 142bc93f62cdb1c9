"""FastAPI dependencies for WellPump.

Collaborators are constructed once in ``create_app`` and kept on
``app.state``; routes receive them through ``Depends()``.
"""

import logging

from fastapi import Request

logger = logging.getLogger(__name__)


async def get_pump_catalog(request: Request):
    """Get PumpCatalog from app state."""
    return request.app.state.pump_catalog


async def get_selection_service(request: Request):
    """Get SelectionService from app state."""
    return request.app.state.selection_service
