"""Pending payment ORM model for ad-hoc resident obligations."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from vaad.models import Base, BaseModel


class PendingPayment(Base, BaseModel):
    """Ad-hoc obligation charged to a resident (repairs, special levies).

    Unlike fee payments the paid state is an explicit flag.
    """

    __tablename__ = "pending_payments"

    resident_id: Mapped[int] = mapped_column(
        ForeignKey("residents.id"),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
        comment="Payment is owed from this moment; no date means owed immediately",
    )
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    def __repr__(self) -> str:
        return (
            f"<PendingPayment(id={self.id}, resident_id={self.resident_id}, "
            f"amount={self.amount}, due_date={self.due_date}, is_paid={self.is_paid})>"
        )


__all__ = ["PendingPayment"]
