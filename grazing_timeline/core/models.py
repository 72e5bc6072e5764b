from sqlalchemy import (
    Column, String, Integer, Float, Text, Boolean, ForeignKey, Table, Index
)
from sqlalchemy.orm import relationship, Mapped, mapped_column
from typing import Optional, List

from .database import Base

# A movement log moves animal assets ...
log_asset = Table(
    "log_asset",
    Base.metadata,
    Column("log_id", Integer, ForeignKey("logs.id", ondelete="CASCADE"), primary_key=True),
    Column("asset_id", Integer, ForeignKey("assets.id", ondelete="CASCADE"), primary_key=True),
)

# ... to one or more location assets.
log_location = Table(
    "log_location",
    Base.metadata,
    Column("log_id", Integer, ForeignKey("logs.id", ondelete="CASCADE"), primary_key=True),
    Column("asset_id", Integer, ForeignKey("assets.id", ondelete="CASCADE"), primary_key=True),
)

class Plan(Base):
    """Represents a farm plan. Only plans of type 'grazing' have a grazing timeline."""
    __tablename__ = "plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(64), nullable=False)

    grazing_events = relationship("GrazingEvent", back_populates="plan")

class Asset(Base):
    """Represents an asset: an animal group, or a location such as a paddock."""
    __tablename__ = "assets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(64), nullable=False)
    is_location: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

class Log(Base):
    """Represents an activity log. Grazing events reference the movement log they plan."""
    __tablename__ = "logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(64), nullable=False)
    timestamp: Mapped[int] = mapped_column(Integer, nullable=False)

    assets: Mapped[List[Asset]] = relationship(secondary=log_asset)
    locations: Mapped[List[Asset]] = relationship(secondary=log_location)

class GrazingEvent(Base):
    """Represents a grazing event plan record: one occupation of a unit within a plan."""
    __tablename__ = "grazing_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    plan_id: Mapped[int] = mapped_column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False)
    log_id: Mapped[int] = mapped_column(Integer, ForeignKey("logs.id", ondelete="CASCADE"), nullable=False)
    start: Mapped[int] = mapped_column(Integer, nullable=False)  # epoch seconds
    duration: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # hours
    recovery: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # hours

    plan = relationship("Plan", back_populates="grazing_events")
    log: Mapped[Log] = relationship()

    __table_args__ = (
        Index("idx_grazing_events_plan_start", "plan_id", "start"),
    )
