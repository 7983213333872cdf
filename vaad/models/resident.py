"""Resident ORM model for apartment occupants paying committee fees."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from vaad.models import Base, BaseModel


class Resident(Base, BaseModel):
    """Model representing a resident of the building.

    Residents are never deleted; committee staff soft-disable them with
    ``is_active=False``. The apartment number is the join key for charging
    stations and must be compared trimmed.
    """

    __tablename__ = "residents"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    apartment_number: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
        comment="Apartment number as entered by staff (may carry whitespace)",
    )
    monthly_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0"),
        comment="Monthly committee fee for this resident",
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
    )

    # Contact information
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    phone2: Mapped[str | None] = mapped_column(String(30), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    join_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (Index("idx_resident_active_apartment", "is_active", "apartment_number"),)

    def __repr__(self) -> str:
        return (
            f"<Resident(id={self.id}, name={self.name!r}, "
            f"apartment_number={self.apartment_number!r}, monthly_fee={self.monthly_fee}, "
            f"is_active={self.is_active})>"
        )


__all__ = ["Resident"]
