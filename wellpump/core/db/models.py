"""
SQLAlchemy ORM models for WellPump.

- Pump: one catalog entry per pump model, keyed by a surrogate integer id,
  unique on name, sorted everywhere by gpm_value.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Float, Index, Integer, String, TIMESTAMP
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Pump(Base):
    """Pump model in the selection catalog."""
    __tablename__ = "pumps"
    __table_args__ = (
        Index('idx_pumps_gpm_value', 'gpm_value'),
        CheckConstraint('gpm_value >= 0', name='ck_pumps_gpm_value_non_negative'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    gpm_value = Column(Integer, nullable=False)             # rated flow, GPM
    efficiency_min = Column(Float, nullable=False)
    efficiency_max = Column(Float, nullable=False)
    image_path = Column(String(2048), default="", nullable=False)   # curve chart
    head_ft = Column(Float, nullable=True)                  # rated head, feet
    created_at = Column(TIMESTAMP, default=datetime.utcnow, nullable=False)
    updated_at = Column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Pump(id={self.id}, name='{self.name}', gpm={self.gpm_value})>"
