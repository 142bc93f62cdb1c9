"""
Database module for WellPump.

Exports:
- DatabaseManager: Database connection and session management
- get_database_manager: Factory function for DatabaseManager
- Models: Pump
- Base: SQLAlchemy declarative base
"""

from .db import DatabaseManager, get_database_manager
from .models import Base, Pump

__all__ = [
    "DatabaseManager",
    "get_database_manager",
    "Base",
    "Pump",
]
