"""Building-wide settings ORM model (single row)."""

from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from vaad.models import Base, BaseModel


class BuildingSettings(Base, BaseModel):
    """Committee settings shared by all screens and reports."""

    __tablename__ = "settings"

    personal_balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
        comment="Opening cash balance applied once at the base of the cumulative balance",
    )
    kwh_price: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False, default=Decimal("0"))
    monthly_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0"),
        comment="Default monthly fee for residents without their own fee",
    )
    building_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    building_address: Mapped[str | None] = mapped_column(String(300), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<BuildingSettings(id={self.id}, personal_balance={self.personal_balance}, "
            f"kwh_price={self.kwh_price}, monthly_fee={self.monthly_fee})>"
        )


__all__ = ["BuildingSettings"]
