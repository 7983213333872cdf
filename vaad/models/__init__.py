"""SQLAlchemy base model with common fields and model exports."""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Base class for all models
Base = declarative_base()


class BaseModel:
    """Base model with common timestamp fields."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )


# Import models to register them with Base (after Base is defined)
from vaad.models.charging_station import ChargingStation  # noqa: E402
from vaad.models.committee_expense import CommitteeExpense  # noqa: E402
from vaad.models.committee_income import CommitteeIncome  # noqa: E402
from vaad.models.email_settings import EmailSettings  # noqa: E402
from vaad.models.fee_payment import FeePayment  # noqa: E402
from vaad.models.meter_reading import MeterReading  # noqa: E402
from vaad.models.pending_payment import PendingPayment  # noqa: E402
from vaad.models.periodic_maintenance import (  # noqa: E402
    MaintenanceFrequency,
    PeriodicMaintenance,
)
from vaad.models.resident import Resident  # noqa: E402
from vaad.models.settings import BuildingSettings  # noqa: E402

__all__ = [
    "Base",
    "BaseModel",
    "BuildingSettings",
    "ChargingStation",
    "CommitteeExpense",
    "CommitteeIncome",
    "EmailSettings",
    "FeePayment",
    "MaintenanceFrequency",
    "MeterReading",
    "PendingPayment",
    "PeriodicMaintenance",
    "Resident",
]
