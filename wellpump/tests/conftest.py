"""Shared fixtures: an in-memory SQLite catalog, empty or seeded."""

import pytest

from wellpump.core.catalog import PumpCatalog, PumpSpec
from wellpump.core.db import DatabaseManager

SEED_FLOWS = [5, 7, 10, 13, 18, 25]


def make_spec(
    gpm: int,
    name: str = None,
    efficiency: tuple = (100.0, 400.0),
    image_path: str = "",
    head_ft: float = None,
) -> PumpSpec:
    return PumpSpec(
        name=name if name is not None else f"{gpm}gpm",
        gpm_value=gpm,
        efficiency_min=efficiency[0],
        efficiency_max=efficiency[1],
        image_path=image_path,
        head_ft=head_ft,
    )


@pytest.fixture
def db_manager():
    db = DatabaseManager("sqlite://")
    db.init_db()
    yield db
    db.close()


@pytest.fixture
def catalog(db_manager):
    return PumpCatalog(db_manager)


@pytest.fixture
def seeded_catalog(catalog):
    """Catalog holding 5/7/10/13/18/25 GPM pumps, inserted out of order."""
    for gpm in [18, 5, 25, 10, 7, 13]:
        catalog.insert_pump(make_spec(
            gpm,
            efficiency=(200.0 - gpm, 500.0 - gpm),
            image_path=f"https://cdn.example.com/pumps/{gpm}gpm.png",
            head_ft=400.0 - gpm * 6,
        ))
    return catalog
