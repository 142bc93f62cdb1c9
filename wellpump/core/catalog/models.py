"""Typed payloads for writing to the pump catalog."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


@dataclass
class PumpSpec:
    """Fields of a new pump record (the store assigns id and timestamps)."""
    name: str
    gpm_value: int
    efficiency_min: float
    efficiency_max: float
    image_path: str = ""
    head_ft: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class PumpPatch:
    """Partial update of a pump record.

    Only the fields declared here can be written; a field left as None is
    not touched.
    """
    name: Optional[str] = None
    gpm_value: Optional[int] = None
    efficiency_min: Optional[float] = None
    efficiency_max: Optional[float] = None
    image_path: Optional[str] = None
    head_ft: Optional[float] = None

    def changes(self) -> Dict[str, Any]:
        """Column -> value for every field that was provided."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.changes()
