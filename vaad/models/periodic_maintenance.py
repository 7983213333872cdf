"""Periodic maintenance ORM model (elevator service, fire extinguishers, etc)."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import Boolean, DateTime, Numeric, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from vaad.models import Base, BaseModel


class MaintenanceFrequency(str, Enum):
    """How often a periodic task recurs."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"


class PeriodicMaintenance(Base, BaseModel):
    """Recurring building task with a next-due date."""

    __tablename__ = "periodic_maintenance"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    frequency: Mapped[MaintenanceFrequency] = mapped_column(
        SQLEnum(MaintenanceFrequency),
        nullable=False,
    )
    next_due: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    last_performed: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    estimated_cost: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    assigned_to: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<PeriodicMaintenance(id={self.id}, title={self.title!r}, "
            f"frequency={self.frequency}, next_due={self.next_due}, is_active={self.is_active})>"
        )


__all__ = ["PeriodicMaintenance", "MaintenanceFrequency"]
