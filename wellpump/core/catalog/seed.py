"""Load the static pump seed document into the catalog.

The document is JSON, either ``{"floWise": [...]}`` or a bare array, with
entries shaped like::

    {"name": "18gpm", "efficencyRange": [150, 450], "value": 18,
     "imagePath": "/pumps/18gpm.png", "head": 300}

``efficencyRange`` keeps the historical spelling of the source data.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import MissingParameterError
from .models import PumpSpec
from .pump_catalog import PumpCatalog

logger = logging.getLogger(__name__)

SEED_COLLECTION_KEY = "floWise"


class SeedPump(BaseModel):
    """One entry of the seed document."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    efficiency_range: Tuple[float, float] = Field(..., alias="efficencyRange")
    value: int = Field(..., ge=0)
    image_path: str = Field("", alias="imagePath")
    head: Optional[float] = None

    @field_validator("image_path", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return v or ""

    def to_spec(self) -> PumpSpec:
        return PumpSpec(
            name=self.name,
            gpm_value=self.value,
            efficiency_min=self.efficiency_range[0],
            efficiency_max=self.efficiency_range[1],
            image_path=self.image_path,
            head_ft=self.head,
        )


def parse_seed_document(document: Union[dict, list]) -> List[PumpSpec]:
    """Validate a decoded seed document and convert it to PumpSpecs.

    Raises:
        MissingParameterError: the document has no pump array
        pydantic.ValidationError: an entry is malformed
    """
    if isinstance(document, dict):
        if SEED_COLLECTION_KEY not in document:
            raise MissingParameterError(
                f"Seed document has no '{SEED_COLLECTION_KEY}' array"
            )
        entries = document[SEED_COLLECTION_KEY]
    else:
        entries = document

    if not isinstance(entries, list):
        raise MissingParameterError("Seed pumps must be a JSON array")

    return [SeedPump.model_validate(entry).to_spec() for entry in entries]


def load_seed_file(path: Union[str, Path]) -> List[PumpSpec]:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        document = json.load(f)
    specs = parse_seed_document(document)
    logger.info(f"Loaded {len(specs)} pumps from {path}")
    return specs


def seed_catalog(
    catalog: PumpCatalog,
    path: Union[str, Path],
    clear: bool = False,
) -> int:
    """Seed ``catalog`` from the document at ``path``.

    With ``clear`` the catalog is emptied first. The batch itself is
    all-or-nothing.
    """
    try:
        specs = load_seed_file(path)
    except ValidationError as e:
        logger.error(f"Seed document {path} is invalid: {e}")
        raise

    if clear:
        catalog.clear_all_pumps()

    count = catalog.seed_pumps(specs)

    for pump in catalog.get_all_pumps():
        logger.info(
            f"- {pump['name']}: {pump['gpm_value']} GPM "
            f"({pump['efficiency_min']}-{pump['efficiency_max']})"
        )
    return count
