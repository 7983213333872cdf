"""Committee expense ORM model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vaad.models import Base, BaseModel


class CommitteeExpense(Base, BaseModel):
    """Free-form expense entry.

    Expenses carry no paid flag: every recorded expense reduces the balance.
    """

    __tablename__ = "committee_expenses"

    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<CommitteeExpense(id={self.id}, category={self.category!r}, "
            f"amount={self.amount}, date={self.date})>"
        )


__all__ = ["CommitteeExpense"]
