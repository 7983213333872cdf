"""Meter reading ORM model for monthly EV charging bills."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from vaad.models import Base, BaseModel


class MeterReading(Base, BaseModel):
    """Monthly sub-meter reading of a charging station and the resulting bill."""

    __tablename__ = "meter_readings"

    station_id: Mapped[int] = mapped_column(
        ForeignKey("charging_stations.id"),
        nullable=False,
        index=True,
    )
    previous_reading: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    current_reading: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    consumption: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
        comment="current_reading - previous_reading (kWh)",
    )
    price_per_kwh: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False, default=Decimal("0"))
    total_cost: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    month: Mapped[int] = mapped_column(Integer, nullable=False, comment="Billing month, 1-12")
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    reading_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    paid_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (Index("idx_reading_station_period", "station_id", "year", "month"),)

    def __repr__(self) -> str:
        return (
            f"<MeterReading(id={self.id}, station_id={self.station_id}, "
            f"period={self.month}/{self.year}, total_cost={self.total_cost}, is_paid={self.is_paid})>"
        )


__all__ = ["MeterReading"]
