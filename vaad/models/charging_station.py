"""EV charging station ORM model."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from vaad.models import Base, BaseModel


class ChargingStation(Base, BaseModel):
    """One EV charger in the parking lot, bound to an apartment.

    ``resident_name`` is a display copy and may drift from the resident
    record; ownership is resolved through ``apartment_number`` only.
    """

    __tablename__ = "charging_stations"

    apartment_number: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    resident_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    meter_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<ChargingStation(id={self.id}, apartment_number={self.apartment_number!r}, "
            f"resident_name={self.resident_name!r})>"
        )


__all__ = ["ChargingStation"]
