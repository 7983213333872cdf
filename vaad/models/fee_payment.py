"""Fee payment ORM model for monthly committee fee obligations."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from vaad.models import Base, BaseModel


class FeePayment(Base, BaseModel):
    """Monthly committee fee record for one resident.

    ``month``/``year`` is the obligation period the fee is for. ``payment_date``
    is when the money actually arrived, which can fall in a different month.
    """

    __tablename__ = "fee_payments"

    resident_id: Mapped[int] = mapped_column(
        ForeignKey("residents.id"),
        nullable=False,
        index=True,
    )
    resident_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    apartment_number: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    month: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Obligation month, 1-12",
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    payment_date: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
        comment="When the fee was paid (drives monthly income reports)",
    )
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    __table_args__ = (Index("idx_fee_resident_period", "resident_id", "year", "month"),)

    def __repr__(self) -> str:
        return (
            f"<FeePayment(id={self.id}, resident_id={self.resident_id}, "
            f"period={self.month}/{self.year}, amount={self.amount}, is_paid={self.is_paid})>"
        )


__all__ = ["FeePayment"]
