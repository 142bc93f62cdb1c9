"""Pump Catalog for WellPump.

Provides CRUD operations and the three query shapes (flow range,
efficiency range, substring search) over the ``pumps`` table.
Every read returns plain dicts sorted ascending by gpm_value.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import String, cast, or_
from sqlalchemy.exc import IntegrityError

from ..db import DatabaseManager
from ..db.models import Pump
from ..exceptions import ConstraintViolationError
from .models import PumpPatch, PumpSpec

logger = logging.getLogger(__name__)

_LIKE_ESCAPE = "\\"


def _like_pattern(term: str) -> str:
    """Substring LIKE pattern with wildcards in ``term`` taken literally."""
    escaped = (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _check_values(values: Dict) -> None:
    """Reject column values the table would not accept.

    Only keys present in ``values`` are checked, so partial updates pass
    through untouched fields.
    """
    if "name" in values and (not values["name"] or not values["name"].strip()):
        raise ConstraintViolationError("Pump name must not be empty")
    gpm = values.get("gpm_value")
    if gpm is not None and gpm < 0:
        raise ConstraintViolationError(f"gpm_value must be >= 0, got {gpm}")


class PumpCatalog:
    """Manages the pump catalog with database persistence."""

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager
        logger.info("PumpCatalog initialized")

    # =========================================================================
    # Writes
    # =========================================================================

    def insert_pump(self, spec: PumpSpec) -> int:
        """Insert a new pump and return its id.

        Raises:
            ConstraintViolationError: name is empty or already taken
        """
        _check_values(spec.to_dict())

        try:
            with self.db.get_session() as session:
                existing = session.query(Pump).filter(Pump.name == spec.name).first()
                if existing:
                    raise ConstraintViolationError(f"Pump '{spec.name}' already exists")

                pump = Pump(**spec.to_dict())
                session.add(pump)
                session.flush()

                logger.info(f"Created pump: {pump.id} ({spec.name}, {spec.gpm_value} GPM)")
                return pump.id

        except ConstraintViolationError:
            raise
        except IntegrityError as e:
            logger.warning(f"Insert of pump '{spec.name}' hit a constraint: {e.orig}")
            raise ConstraintViolationError(f"Pump '{spec.name}' already exists") from e
        except Exception as e:
            logger.error(f"Failed to create pump '{spec.name}': {e}")
            raise

    def update_pump(self, pump_id: int, patch: PumpPatch) -> bool:
        """Apply ``patch`` to a pump. Returns False if the pump does not exist.

        All provided fields are written in one transaction; a name clash
        raises ConstraintViolationError and nothing is applied.
        """
        changes = patch.changes()
        _check_values(changes)

        try:
            with self.db.get_session() as session:
                pump = session.query(Pump).filter(Pump.id == pump_id).first()
                if not pump:
                    return False

                new_name = changes.get("name")
                if new_name and new_name != pump.name:
                    clash = session.query(Pump).filter(
                        Pump.name == new_name,
                        Pump.id != pump_id,
                    ).first()
                    if clash:
                        raise ConstraintViolationError(f"Pump name '{new_name}' already exists")

                for column, value in changes.items():
                    setattr(pump, column, value)

                pump.updated_at = datetime.utcnow()
                session.flush()

                logger.info(f"Updated pump {pump_id}: {sorted(changes)}")
                return True

        except ConstraintViolationError:
            raise
        except IntegrityError as e:
            logger.warning(f"Update of pump {pump_id} hit a constraint: {e.orig}")
            raise ConstraintViolationError(f"Update of pump {pump_id} violates a constraint") from e
        except Exception as e:
            logger.error(f"Failed to update pump {pump_id}: {e}")
            raise

    def delete_pump(self, pump_id: int) -> bool:
        """Delete a pump. Returns False if it does not exist."""
        try:
            with self.db.get_session() as session:
                deleted = session.query(Pump).filter(Pump.id == pump_id).delete()
                if deleted:
                    logger.info(f"Deleted pump {pump_id}")
                return deleted > 0

        except Exception as e:
            logger.error(f"Failed to delete pump {pump_id}: {e}")
            raise

    def clear_all_pumps(self) -> int:
        """Delete every pump; returns how many were removed."""
        with self.db.get_session() as session:
            deleted = session.query(Pump).delete()
        logger.info(f"Cleared {deleted} pumps from catalog")
        return deleted

    def seed_pumps(self, specs: Iterable[PumpSpec]) -> int:
        """Insert or overwrite (by name) a batch of pumps in one transaction.

        Either every record of the batch is written or none is.
        """
        specs = list(specs)
        try:
            with self.db.get_session() as session:
                for spec in specs:
                    _check_values(spec.to_dict())

                    pump = session.query(Pump).filter(Pump.name == spec.name).first()
                    if pump:
                        for column, value in spec.to_dict().items():
                            setattr(pump, column, value)
                        pump.updated_at = datetime.utcnow()
                    else:
                        session.add(Pump(**spec.to_dict()))
                    # Flush per record so duplicate names inside the batch resolve
                    session.flush()

            logger.info(f"Seeded {len(specs)} pumps")
            return len(specs)

        except Exception as e:
            logger.error(f"Seeding rolled back: {e}")
            raise

    # =========================================================================
    # Reads
    # =========================================================================

    def get_pump(self, pump_id: int) -> Optional[Dict]:
        with self.db.get_session() as session:
            pump = session.query(Pump).filter(Pump.id == pump_id).first()
            return self._pump_to_dict(pump) if pump else None

    def get_pump_by_name(self, name: str) -> Optional[Dict]:
        with self.db.get_session() as session:
            pump = session.query(Pump).filter(Pump.name == name).first()
            return self._pump_to_dict(pump) if pump else None

    def get_all_pumps(self) -> List[Dict]:
        """All pumps, ascending by gpm_value."""
        return self._query_pumps()

    def get_pumps_by_gpm_range(self, min_gpm: float, max_gpm: float) -> List[Dict]:
        """Pumps with min_gpm <= gpm_value <= max_gpm."""
        return self._query_pumps(Pump.gpm_value.between(min_gpm, max_gpm))

    def get_pumps_by_efficiency_range(
        self, min_efficiency: float, max_efficiency: float
    ) -> List[Dict]:
        """Pumps whose efficiency window lies inside [min_efficiency, max_efficiency]."""
        return self._query_pumps(
            Pump.efficiency_min >= min_efficiency,
            Pump.efficiency_max <= max_efficiency,
        )

    def search_pumps(self, term: str) -> List[Dict]:
        """Case-insensitive substring match on name or on the gpm_value text."""
        pattern = _like_pattern(term)
        return self._query_pumps(
            or_(
                Pump.name.ilike(pattern, escape=_LIKE_ESCAPE),
                cast(Pump.gpm_value, String).ilike(pattern, escape=_LIKE_ESCAPE),
            )
        )

    def count_pumps(self) -> int:
        with self.db.get_session() as session:
            return session.query(Pump).count()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _query_pumps(self, *criteria) -> List[Dict]:
        try:
            with self.db.get_session() as session:
                query = session.query(Pump)
                if criteria:
                    query = query.filter(*criteria)
                pumps = query.order_by(Pump.gpm_value.asc(), Pump.id.asc()).all()
                return [self._pump_to_dict(p) for p in pumps]

        except Exception as e:
            logger.error(f"Failed to query pumps: {e}")
            raise

    @staticmethod
    def _pump_to_dict(pump: Pump) -> Dict:
        return {
            "id": pump.id,
            "name": pump.name,
            "gpm_value": pump.gpm_value,
            "efficiency_min": pump.efficiency_min,
            "efficiency_max": pump.efficiency_max,
            "image_path": pump.image_path or "",
            "head_ft": pump.head_ft,
            "created_at": pump.created_at.isoformat() if pump.created_at else None,
            "updated_at": pump.updated_at.isoformat() if pump.updated_at else None,
        }
