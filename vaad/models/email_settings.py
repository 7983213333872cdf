"""Email reminder settings ORM model (single row)."""

from sqlalchemy import JSON, Boolean, Integer
from sqlalchemy.orm import Mapped, mapped_column

from vaad.models import Base, BaseModel


class EmailSettings(Base, BaseModel):
    """Schedule and exclusions for the monthly debt reminder job."""

    __tablename__ = "email_settings"

    schedule_day: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=20,
        comment="Day of month the reminder runs (1-28)",
    )
    schedule_hour: Mapped[int] = mapped_column(Integer, nullable=False, default=9)
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    excluded_resident_ids: Mapped[list[int]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Residents who never receive reminders",
    )

    def __repr__(self) -> str:
        return (
            f"<EmailSettings(id={self.id}, schedule_day={self.schedule_day}, "
            f"schedule_hour={self.schedule_hour}, is_enabled={self.is_enabled})>"
        )


__all__ = ["EmailSettings"]
