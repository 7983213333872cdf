"""Debt aggregation: outstanding fees, pending payments and charging bills per resident.

Total debt of a resident is the sum of three independently computed buckets:

- committee fees: unpaid fee records whose obligation month has started
- pending payments: unpaid ad-hoc payments without a due date or already due
- charging bills: unpaid meter readings whose billing month has started, joined
  to the resident through the station's apartment number

Residents with nothing outstanding are left out of the result. The aggregation
is pure; ``DebtService`` only adds the ledger fetch in front of it.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, NamedTuple, Sequence

from vaad.services.amounts import ZERO, record_amount, to_amount
from vaad.services.apartment_index import ApartmentIndex
from vaad.services.ledger_reader import DebtSnapshot, LedgerReader, load_debt_snapshot
from vaad.services.locale_service import is_valid_month, month_label
from vaad.services.periods import is_obligation_due

logger = logging.getLogger(__name__)


class DebtItem(NamedTuple):
    """One outstanding line (a month of fees, a pending payment, a charging bill)."""

    label: str
    amount: Decimal


@dataclass
class ResidentDebt:
    """Outstanding items of one resident, itemized per bucket."""

    resident: Any
    committee_fees: list[DebtItem] = field(default_factory=list)
    pending_payments: list[DebtItem] = field(default_factory=list)
    charging_bills: list[DebtItem] = field(default_factory=list)

    @property
    def total_debt(self) -> Decimal:
        return sum(
            (item.amount for item in self.committee_fees + self.pending_payments + self.charging_bills),
            ZERO,
        )


class DebtSummaryLine(NamedTuple):
    """Compact per-resident line of the debt summary."""

    resident_name: str
    apartment_number: str
    total_debt: Decimal
    has_email: bool
    committee_fee_count: int
    committee_fee_total: Decimal
    committee_fee_months: list[str]
    pending_payment_count: int
    charging_bill_count: int


@dataclass
class DebtSummary:
    """Building-wide overview of who owes what."""

    total_residents_with_debt: int
    total_debt: Decimal
    debts: list[DebtSummaryLine]


class _PeriodItem(NamedTuple):
    year: int
    month: int
    item: DebtItem


def is_pending_payment_due(payment: Any, now: datetime) -> bool:
    """A pending payment is due when it has no due date or the date has passed."""
    due_date = getattr(payment, "due_date", None)
    return due_date is None or due_date <= now


def _has_valid_period(record: Any, source: str) -> bool:
    month = getattr(record, "month", None)
    if not is_valid_month(month):
        logger.warning(
            "Skipping %s record id=%s: month out of range %r",
            source,
            getattr(record, "id", "?"),
            month,
        )
        return False
    return True


def _collect_fee_items(fee_payments: Iterable[Any], now: datetime) -> dict[Any, list[_PeriodItem]]:
    fees: dict[Any, list[_PeriodItem]] = defaultdict(list)
    for fee in fee_payments:
        if not _has_valid_period(fee, "fee payment"):
            continue
        if not is_obligation_due(fee.month, fee.year, now):
            continue
        amount = record_amount(fee, "amount", "fee payment")
        if amount is None:
            continue
        fees[fee.resident_id].append(
            _PeriodItem(fee.year, fee.month, DebtItem(month_label(fee.month, fee.year), amount))
        )
    return fees


def _collect_unrecorded_fee_items(
    residents: Iterable[Any],
    recorded_fees: Iterable[Any],
    default_monthly_fee: Decimal,
    now: datetime,
) -> dict[Any, list[_PeriodItem]]:
    """Charge current-year months that have no fee record at all."""
    recorded = {(fee.resident_id, fee.year, fee.month) for fee in recorded_fees}
    fees: dict[Any, list[_PeriodItem]] = defaultdict(list)
    for resident in residents:
        monthly_fee = to_amount(getattr(resident, "monthly_fee", None))
        if not monthly_fee or monthly_fee <= ZERO:
            monthly_fee = default_monthly_fee
        if monthly_fee <= ZERO:
            continue
        for month in range(1, now.month + 1):
            if (resident.id, now.year, month) in recorded:
                continue
            fees[resident.id].append(
                _PeriodItem(now.year, month, DebtItem(month_label(month, now.year), monthly_fee))
            )
    return fees


def _collect_pending_items(pending_payments: Iterable[Any], now: datetime) -> dict[Any, list[DebtItem]]:
    pending: dict[Any, list[DebtItem]] = defaultdict(list)
    for payment in pending_payments:
        if not is_pending_payment_due(payment, now):
            continue
        amount = record_amount(payment, "amount", "pending payment")
        if amount is None:
            continue
        pending[payment.resident_id].append(DebtItem(payment.description or "", amount))
    return pending


def _collect_charging_items(
    stations: Iterable[Any],
    meter_readings: Iterable[Any],
    index: ApartmentIndex,
    now: datetime,
) -> dict[Any, list[_PeriodItem]]:
    station_owner: dict[Any, Any] = {}
    for station in stations:
        match = index.lookup(station.apartment_number)
        if match.resident is None:
            logger.debug(
                "Charging station id=%s at apartment %r has no active resident",
                station.id,
                station.apartment_number,
            )
            continue
        station_owner[station.id] = match.resident.id

    bills: dict[Any, list[_PeriodItem]] = defaultdict(list)
    for reading in meter_readings:
        if not _has_valid_period(reading, "meter reading"):
            continue
        if not is_obligation_due(reading.month, reading.year, now):
            continue
        owner_id = station_owner.get(reading.station_id)
        if owner_id is None:
            logger.debug("Meter reading id=%s belongs to an unattributed station", reading.id)
            continue
        amount = record_amount(reading, "total_cost", "meter reading")
        if amount is None:
            continue
        bills[owner_id].append(
            _PeriodItem(reading.year, reading.month, DebtItem(month_label(reading.month, reading.year), amount))
        )
    return bills


def _chronological(items: list[_PeriodItem]) -> list[DebtItem]:
    return [entry.item for entry in sorted(items, key=lambda entry: (entry.year, entry.month))]


def compute_debts(
    snapshot: DebtSnapshot,
    now: datetime,
    include_unrecorded_months: bool = False,
) -> list[ResidentDebt]:
    """Compute outstanding debt of every active resident.

    Args:
        snapshot: Active residents and unpaid ledgers
        now: Reference moment deciding which obligations are due
        include_unrecorded_months: Also charge current-year months with no fee
            record at all (needs ``snapshot.paid_fee_payments``)

    Returns:
        ResidentDebt for each resident with positive total debt, in snapshot order
    """
    index = ApartmentIndex.from_residents(snapshot.residents)

    fees = _collect_fee_items(snapshot.unpaid_fee_payments, now)
    if include_unrecorded_months:
        unrecorded = _collect_unrecorded_fee_items(
            snapshot.residents,
            list(snapshot.unpaid_fee_payments) + list(snapshot.paid_fee_payments),
            snapshot.default_monthly_fee,
            now,
        )
        for resident_id, items in unrecorded.items():
            fees[resident_id].extend(items)

    pending = _collect_pending_items(snapshot.unpaid_pending_payments, now)
    charging = _collect_charging_items(snapshot.charging_stations, snapshot.unpaid_meter_readings, index, now)

    debts = []
    for resident in snapshot.residents:
        debt = ResidentDebt(
            resident=resident,
            committee_fees=_chronological(fees.get(resident.id, [])),
            pending_payments=list(pending.get(resident.id, [])),
            charging_bills=_chronological(charging.get(resident.id, [])),
        )
        if debt.total_debt > ZERO:
            debts.append(debt)

    logger.info(
        "Computed debts: %d of %d active residents owe money",
        len(debts),
        len(snapshot.residents),
    )
    return debts


def summarize_debts(debts: Sequence[ResidentDebt]) -> DebtSummary:
    """Condense resident debts into the overview shown to the committee."""
    lines = []
    for debt in debts:
        resident = debt.resident
        lines.append(
            DebtSummaryLine(
                resident_name=resident.name,
                apartment_number=resident.apartment_number,
                total_debt=debt.total_debt,
                has_email=bool(getattr(resident, "email", None)),
                committee_fee_count=len(debt.committee_fees),
                committee_fee_total=sum((item.amount for item in debt.committee_fees), ZERO),
                committee_fee_months=[item.label for item in debt.committee_fees],
                pending_payment_count=len(debt.pending_payments),
                charging_bill_count=len(debt.charging_bills),
            )
        )
    return DebtSummary(
        total_residents_with_debt=len(debts),
        total_debt=sum((debt.total_debt for debt in debts), ZERO),
        debts=lines,
    )


def reminder_recipients(
    debts: Iterable[ResidentDebt],
    excluded_resident_ids: Iterable[Any] = (),
) -> list[ResidentDebt]:
    """Residents the reminder job should email: owing money, reachable, not excluded."""
    excluded = set(excluded_resident_ids)
    return [
        debt
        for debt in debts
        if debt.total_debt > ZERO
        and (getattr(debt.resident, "email", None) or "").strip()
        and debt.resident.id not in excluded
    ]


class DebtService:
    """Fetch the unpaid ledgers and aggregate resident debts."""

    def __init__(self, reader: LedgerReader):
        self.reader = reader

    async def compute_debts(self, now: datetime, include_unrecorded_months: bool = False) -> list[ResidentDebt]:
        """Compute debts from a fresh snapshot.

        Raises:
            Whatever the reader raises; no partial result is returned
        """
        snapshot = await load_debt_snapshot(self.reader, include_paid_fees=include_unrecorded_months)
        return compute_debts(snapshot, now, include_unrecorded_months=include_unrecorded_months)

    async def get_reminder_recipients(self, now: datetime) -> list[ResidentDebt]:
        """Debts of residents who should receive the monthly reminder email."""
        debts = await self.compute_debts(now)
        email_settings = await self.reader.get_email_settings()
        excluded = getattr(email_settings, "excluded_resident_ids", None) or []
        recipients = reminder_recipients(debts, excluded)
        logger.info("Reminder recipients: %d of %d residents with debt", len(recipients), len(debts))
        return recipients


__all__ = [
    "DebtItem",
    "ResidentDebt",
    "DebtSummary",
    "DebtSummaryLine",
    "DebtService",
    "compute_debts",
    "is_pending_payment_due",
    "reminder_recipients",
    "summarize_debts",
]
