"""Read-only access to the committee ledgers.

``LedgerReader`` is the persistence boundary of the debt and balance engines.
``SqlLedgerReader`` implements it over SQLAlchemy, opening one session per
fetch so several collections can be loaded concurrently with ``asyncio.gather``.

Snapshots are immutable bundles of everything one computation needs. They are
built fresh for every call and never cached.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vaad.models.charging_station import ChargingStation
from vaad.models.committee_expense import CommitteeExpense
from vaad.models.committee_income import CommitteeIncome
from vaad.models.email_settings import EmailSettings
from vaad.models.fee_payment import FeePayment
from vaad.models.meter_reading import MeterReading
from vaad.models.pending_payment import PendingPayment
from vaad.models.periodic_maintenance import PeriodicMaintenance
from vaad.models.resident import Resident
from vaad.models.settings import BuildingSettings
from vaad.services.amounts import ZERO, to_amount

logger = logging.getLogger(__name__)


class LedgerReader(ABC):
    """Read-only fetch operations, one per ledger collection."""

    @abstractmethod
    async def get_all_active_residents(self) -> Sequence[Any]: ...

    @abstractmethod
    async def get_unpaid_fee_payments(self) -> Sequence[Any]: ...

    @abstractmethod
    async def get_unpaid_pending_payments(self) -> Sequence[Any]: ...

    @abstractmethod
    async def get_unpaid_meter_readings(self) -> Sequence[Any]: ...

    @abstractmethod
    async def get_all_charging_stations(self) -> Sequence[Any]: ...

    @abstractmethod
    async def get_all_paid_committee_income(self) -> Sequence[Any]: ...

    @abstractmethod
    async def get_all_paid_fee_payments(self) -> Sequence[Any]: ...

    @abstractmethod
    async def get_all_paid_meter_readings(self) -> Sequence[Any]: ...

    @abstractmethod
    async def get_all_committee_expenses(self) -> Sequence[Any]: ...

    @abstractmethod
    async def get_settings(self) -> Any | None: ...

    @abstractmethod
    async def get_email_settings(self) -> Any | None: ...

    @abstractmethod
    async def get_periodic_maintenance(self, active_only: bool = False) -> Sequence[Any]: ...


class SqlLedgerReader(LedgerReader):
    """LedgerReader backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize with session factory.

        Args:
            session_factory: Factory producing a fresh AsyncSession per fetch
        """
        self.session_factory = session_factory

    async def _fetch_all(self, stmt) -> list[Any]:
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def _fetch_first(self, stmt) -> Any | None:
        async with self.session_factory() as session:
            result = await session.execute(stmt.limit(1))
            return result.scalars().first()

    async def get_all_active_residents(self) -> list[Resident]:
        stmt = select(Resident).where(Resident.is_active.is_(True)).order_by(Resident.id)
        return await self._fetch_all(stmt)

    async def get_unpaid_fee_payments(self) -> list[FeePayment]:
        stmt = select(FeePayment).where(FeePayment.is_paid.is_(False)).order_by(FeePayment.id)
        return await self._fetch_all(stmt)

    async def get_unpaid_pending_payments(self) -> list[PendingPayment]:
        stmt = select(PendingPayment).where(PendingPayment.is_paid.is_(False)).order_by(PendingPayment.id)
        return await self._fetch_all(stmt)

    async def get_unpaid_meter_readings(self) -> list[MeterReading]:
        stmt = select(MeterReading).where(MeterReading.is_paid.is_(False)).order_by(MeterReading.id)
        return await self._fetch_all(stmt)

    async def get_all_charging_stations(self) -> list[ChargingStation]:
        return await self._fetch_all(select(ChargingStation).order_by(ChargingStation.id))

    async def get_all_paid_committee_income(self) -> list[CommitteeIncome]:
        stmt = select(CommitteeIncome).where(CommitteeIncome.is_paid.is_(True)).order_by(CommitteeIncome.id)
        return await self._fetch_all(stmt)

    async def get_all_paid_fee_payments(self) -> list[FeePayment]:
        stmt = select(FeePayment).where(FeePayment.is_paid.is_(True)).order_by(FeePayment.id)
        return await self._fetch_all(stmt)

    async def get_all_paid_meter_readings(self) -> list[MeterReading]:
        stmt = select(MeterReading).where(MeterReading.is_paid.is_(True)).order_by(MeterReading.id)
        return await self._fetch_all(stmt)

    async def get_all_committee_expenses(self) -> list[CommitteeExpense]:
        return await self._fetch_all(select(CommitteeExpense).order_by(CommitteeExpense.id))

    async def get_settings(self) -> BuildingSettings | None:
        return await self._fetch_first(select(BuildingSettings).order_by(BuildingSettings.id))

    async def get_email_settings(self) -> EmailSettings | None:
        return await self._fetch_first(select(EmailSettings).order_by(EmailSettings.id))

    async def get_periodic_maintenance(self, active_only: bool = False) -> list[PeriodicMaintenance]:
        stmt = select(PeriodicMaintenance)
        if active_only:
            stmt = stmt.where(PeriodicMaintenance.is_active.is_(True))
        return await self._fetch_all(stmt.order_by(PeriodicMaintenance.next_due.asc()))


@dataclass(frozen=True)
class DebtSnapshot:
    """Ledger state consumed by the debt aggregator."""

    residents: Sequence[Any] = ()
    unpaid_fee_payments: Sequence[Any] = ()
    unpaid_pending_payments: Sequence[Any] = ()
    charging_stations: Sequence[Any] = ()
    unpaid_meter_readings: Sequence[Any] = ()
    paid_fee_payments: Sequence[Any] = ()
    """Only loaded when unrecorded months are charged"""
    default_monthly_fee: Decimal = ZERO


@dataclass(frozen=True)
class BalanceSnapshot:
    """Ledger state consumed by the balance reconciler."""

    paid_committee_income: Sequence[Any] = ()
    paid_fee_payments: Sequence[Any] = ()
    paid_meter_readings: Sequence[Any] = ()
    committee_expenses: Sequence[Any] = ()
    charging_stations: Sequence[Any] = ()
    personal_balance: Decimal = ZERO


def _settings_amount(settings: Any | None, name: str) -> Decimal:
    if settings is None:
        return ZERO
    amount = to_amount(getattr(settings, name, None))
    if amount is None:
        logger.warning("Settings field %s is not a number, using 0", name)
        return ZERO
    return amount


async def load_debt_snapshot(reader: LedgerReader, include_paid_fees: bool = False) -> DebtSnapshot:
    """Fetch every collection the debt aggregator needs, concurrently.

    Any failed fetch propagates and no snapshot is produced.
    """
    residents, unpaid_fees, unpaid_pending, stations, unpaid_readings, settings = await asyncio.gather(
        reader.get_all_active_residents(),
        reader.get_unpaid_fee_payments(),
        reader.get_unpaid_pending_payments(),
        reader.get_all_charging_stations(),
        reader.get_unpaid_meter_readings(),
        reader.get_settings(),
    )
    paid_fees: Sequence[Any] = ()
    if include_paid_fees:
        paid_fees = tuple(await reader.get_all_paid_fee_payments())

    logger.debug(
        "Loaded debt snapshot: residents=%d unpaid_fees=%d pending=%d stations=%d readings=%d",
        len(residents),
        len(unpaid_fees),
        len(unpaid_pending),
        len(stations),
        len(unpaid_readings),
    )
    return DebtSnapshot(
        residents=tuple(residents),
        unpaid_fee_payments=tuple(unpaid_fees),
        unpaid_pending_payments=tuple(unpaid_pending),
        charging_stations=tuple(stations),
        unpaid_meter_readings=tuple(unpaid_readings),
        paid_fee_payments=paid_fees,
        default_monthly_fee=_settings_amount(settings, "monthly_fee"),
    )


async def load_balance_snapshot(reader: LedgerReader) -> BalanceSnapshot:
    """Fetch every collection the balance reconciler needs, concurrently.

    Any failed fetch propagates and no snapshot is produced.
    """
    income, fees, readings, expenses, stations, settings = await asyncio.gather(
        reader.get_all_paid_committee_income(),
        reader.get_all_paid_fee_payments(),
        reader.get_all_paid_meter_readings(),
        reader.get_all_committee_expenses(),
        reader.get_all_charging_stations(),
        reader.get_settings(),
    )
    logger.debug(
        "Loaded balance snapshot: income=%d fees=%d readings=%d expenses=%d",
        len(income),
        len(fees),
        len(readings),
        len(expenses),
    )
    return BalanceSnapshot(
        paid_committee_income=tuple(income),
        paid_fee_payments=tuple(fees),
        paid_meter_readings=tuple(readings),
        committee_expenses=tuple(expenses),
        charging_stations=tuple(stations),
        personal_balance=_settings_amount(settings, "personal_balance"),
    )


__all__ = [
    "LedgerReader",
    "SqlLedgerReader",
    "DebtSnapshot",
    "BalanceSnapshot",
    "load_debt_snapshot",
    "load_balance_snapshot",
]
