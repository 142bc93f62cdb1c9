"""Database connection and session management."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)


def _is_memory_sqlite(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:")


class DatabaseManager:
    """Owns the SQLAlchemy engine and hands out transactional sessions.

    Each ``get_session()`` block is one transaction: it commits when the
    block exits normally and rolls back when it raises.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url

        engine_kwargs = {"echo": echo}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if _is_memory_sqlite(database_url):
                # One shared connection, otherwise every session sees an empty DB
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_pre_ping"] = True

        self._engine: Engine = create_engine(database_url, **engine_kwargs)
        self._session_factory = sessionmaker(
            bind=self._engine, expire_on_commit=False
        )
        logger.info(f"DatabaseManager initialized ({self._engine.dialect.name})")

    @property
    def engine(self) -> Engine:
        return self._engine

    def init_db(self) -> None:
        """Create tables that do not exist yet."""
        Base.metadata.create_all(self._engine)
        logger.info("Database tables ensured")

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        self._engine.dispose()
        logger.info("Database engine disposed")


def get_database_manager(
    database_url: Optional[str] = None,
    echo: Optional[bool] = None,
    init: bool = True,
) -> DatabaseManager:
    """Build a DatabaseManager from explicit arguments or settings."""
    from ...setting import get_settings

    settings = get_settings().database
    manager = DatabaseManager(
        database_url or settings.url,
        echo=settings.echo if echo is None else echo,
    )
    if init:
        manager.init_db()
    return manager
