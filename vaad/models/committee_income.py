"""Committee income ORM model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vaad.models import Base, BaseModel


class CommitteeIncome(Base, BaseModel):
    """Free-form income entry (donations, rentals, refunds). Counts only once paid."""

    __tablename__ = "committee_income"

    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    payer_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<CommitteeIncome(id={self.id}, category={self.category!r}, "
            f"amount={self.amount}, date={self.date}, is_paid={self.is_paid})>"
        )


__all__ = ["CommitteeIncome"]
