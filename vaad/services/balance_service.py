"""Balance reconciliation: monthly totals, cumulative cash balance, category rollups.

Each income source decides membership in a month by its own rule:

- committee income: paid, and its own ``date`` falls in the month
- fee payments: paid, and ``payment_date`` falls in the month (not the
  obligation's month/year: a fee can be paid late or in advance)
- meter readings: paid, and the reading's own ``month``/``year``
- committee expenses: ``date`` falls in the month, no paid condition

Each rule is its own predicate. Cumulative balance is recomputed from the
whole history on every call:

    opening balance + paid income + paid fees + paid charging - all expenses
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Iterable, NamedTuple

from vaad.services.amounts import ZERO, record_amount, round_percentage
from vaad.services.ledger_reader import BalanceSnapshot, LedgerReader, load_balance_snapshot
from vaad.services.localizer import t
from vaad.services.periods import ReportPeriod

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Inclusion predicates, one per ledger
# ---------------------------------------------------------------------------


def committee_income_in_period(entry: Any, period: ReportPeriod) -> bool:
    """Paid committee income dated inside the month."""
    return bool(entry.is_paid) and period.contains(entry.date)


def fee_payment_in_period(payment: Any, period: ReportPeriod) -> bool:
    """Paid fee whose payment date (not obligation period) is inside the month."""
    return bool(payment.is_paid) and period.contains(payment.payment_date)


def meter_reading_in_period(reading: Any, period: ReportPeriod) -> bool:
    """Paid charging bill whose billing month/year is the month."""
    return bool(reading.is_paid) and reading.month == period.month and reading.year == period.year


def committee_expense_in_period(expense: Any, period: ReportPeriod) -> bool:
    """Expense dated inside the month. Expenses have no paid state."""
    return period.contains(expense.date)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class MonthlySummary:
    """Income and expense totals of one calendar month."""

    period: ReportPeriod
    committee_income: Decimal
    fee_income: Decimal
    charging_income: Decimal
    total_expense: Decimal

    @property
    def total_income(self) -> Decimal:
        return self.committee_income + self.fee_income + self.charging_income

    @property
    def monthly_balance(self) -> Decimal:
        return self.total_income - self.total_expense


@dataclass
class YearlySummary:
    """Totals of a calendar year with its twelve monthly rows."""

    year: int
    months: list[MonthlySummary]

    @property
    def committee_income(self) -> Decimal:
        return sum((m.committee_income for m in self.months), ZERO)

    @property
    def fee_income(self) -> Decimal:
        return sum((m.fee_income for m in self.months), ZERO)

    @property
    def charging_income(self) -> Decimal:
        return sum((m.charging_income for m in self.months), ZERO)

    @property
    def total_income(self) -> Decimal:
        return sum((m.total_income for m in self.months), ZERO)

    @property
    def total_expense(self) -> Decimal:
        return sum((m.total_expense for m in self.months), ZERO)

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expense


class CategoryRollup(NamedTuple):
    """Amount of one category and its whole-number share of the month total."""

    category: str
    amount: Decimal
    percentage: int


class CategoryBreakdown(NamedTuple):
    income: list[CategoryRollup]
    expense: list[CategoryRollup]


class LineKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class LedgerLine(NamedTuple):
    """One row of the monthly transaction table printed by every export."""

    date: datetime | None
    category: str
    description: str
    kind: LineKind
    amount: Decimal


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def _sum_amounts(
    records: Iterable[Any],
    field: str,
    source: str,
    include: Callable[[Any], bool] = lambda record: True,
) -> Decimal:
    total = ZERO
    for record in records:
        if not include(record):
            continue
        amount = record_amount(record, field, source)
        if amount is not None:
            total += amount
    return total


def _summarize(snapshot: BalanceSnapshot, period: ReportPeriod) -> MonthlySummary:
    return MonthlySummary(
        period=period,
        committee_income=_sum_amounts(
            snapshot.paid_committee_income,
            "amount",
            "committee income",
            lambda entry: committee_income_in_period(entry, period),
        ),
        fee_income=_sum_amounts(
            snapshot.paid_fee_payments,
            "amount",
            "fee payment",
            lambda payment: fee_payment_in_period(payment, period),
        ),
        charging_income=_sum_amounts(
            snapshot.paid_meter_readings,
            "total_cost",
            "meter reading",
            lambda reading: meter_reading_in_period(reading, period),
        ),
        total_expense=_sum_amounts(
            snapshot.committee_expenses,
            "amount",
            "committee expense",
            lambda expense: committee_expense_in_period(expense, period),
        ),
    )


def compute_monthly(snapshot: BalanceSnapshot, month: int, year: int) -> MonthlySummary:
    """Income, expense and balance of one month.

    Raises:
        InvalidPeriodError: If month/year is out of range
    """
    return _summarize(snapshot, ReportPeriod.of(month, year))


def compute_yearly(snapshot: BalanceSnapshot, year: int) -> YearlySummary:
    """Twelve monthly summaries of a year and their totals."""
    first = ReportPeriod.of(1, year)
    return YearlySummary(
        year=year,
        months=[_summarize(snapshot, ReportPeriod(month, first.year)) for month in range(1, 13)],
    )


def compute_cumulative(snapshot: BalanceSnapshot) -> Decimal:
    """Committee cash balance over the whole history.

    Opening balance plus all paid income, fees and charging bills, minus every
    expense regardless of date. Independent of record order.
    """
    is_paid = lambda record: bool(record.is_paid)  # noqa: E731
    income = _sum_amounts(snapshot.paid_committee_income, "amount", "committee income", is_paid)
    fees = _sum_amounts(snapshot.paid_fee_payments, "amount", "fee payment", is_paid)
    charging = _sum_amounts(snapshot.paid_meter_readings, "total_cost", "meter reading", is_paid)
    expenses = _sum_amounts(snapshot.committee_expenses, "amount", "committee expense")
    return snapshot.personal_balance + income + fees + charging - expenses


def _rollup(amounts: dict[str, Decimal], total: Decimal) -> list[CategoryRollup]:
    return [
        CategoryRollup(category=category, amount=amount, percentage=round_percentage(amount, total))
        for category, amount in amounts.items()
    ]


def _group_by_category(records: Iterable[Any], source: str) -> dict[str, Decimal]:
    grouped: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for record in records:
        amount = record_amount(record, "amount", source)
        if amount is None:
            continue
        grouped[record.category] += amount
    return dict(grouped)


def compute_income_breakdown(snapshot: BalanceSnapshot, month: int, year: int) -> list[CategoryRollup]:
    """Income of the month by category.

    Committee income is grouped by its own category; fee and charging income
    each form one extra category when non-zero, refunds included, so the
    categories always add up to the total income the percentages are measured
    against. Percentages are rounded per category, so they may not add up to
    exactly 100.
    """
    period = ReportPeriod.of(month, year)
    summary = _summarize(snapshot, period)

    amounts = _group_by_category(
        (entry for entry in snapshot.paid_committee_income if committee_income_in_period(entry, period)),
        "committee income",
    )
    if summary.fee_income != ZERO:
        fees_label = t("categories.committee_fees")
        amounts[fees_label] = amounts.get(fees_label, ZERO) + summary.fee_income
    if summary.charging_income != ZERO:
        charging_label = t("categories.charging")
        amounts[charging_label] = amounts.get(charging_label, ZERO) + summary.charging_income

    return _rollup(amounts, summary.total_income)


def compute_expense_breakdown(snapshot: BalanceSnapshot, month: int, year: int) -> list[CategoryRollup]:
    """Expenses of the month by category."""
    period = ReportPeriod.of(month, year)
    expenses = [expense for expense in snapshot.committee_expenses if committee_expense_in_period(expense, period)]
    amounts = _group_by_category(expenses, "committee expense")
    return _rollup(amounts, sum(amounts.values(), ZERO))


def compute_category_breakdown(snapshot: BalanceSnapshot, month: int, year: int) -> CategoryBreakdown:
    """Income and expense rollups of the month, each against its own total."""
    return CategoryBreakdown(
        income=compute_income_breakdown(snapshot, month, year),
        expense=compute_expense_breakdown(snapshot, month, year),
    )


def monthly_ledger_lines(snapshot: BalanceSnapshot, month: int, year: int) -> list[LedgerLine]:
    """Every transaction counted in the month, newest first."""
    period = ReportPeriod.of(month, year)
    stations = {station.id: station for station in snapshot.charging_stations}
    lines: list[LedgerLine] = []

    for entry in snapshot.paid_committee_income:
        amount = record_amount(entry, "amount", "committee income")
        if amount is not None and committee_income_in_period(entry, period):
            lines.append(LedgerLine(entry.date, entry.category, entry.description, LineKind.INCOME, amount))

    for payment in snapshot.paid_fee_payments:
        amount = record_amount(payment, "amount", "fee payment")
        if amount is not None and fee_payment_in_period(payment, period):
            lines.append(
                LedgerLine(
                    payment.payment_date,
                    t("categories.committee_fees"),
                    t("ledger.fee_payment", name=payment.resident_name),
                    LineKind.INCOME,
                    amount,
                )
            )

    for reading in snapshot.paid_meter_readings:
        amount = record_amount(reading, "total_cost", "meter reading")
        if amount is not None and meter_reading_in_period(reading, period):
            station = stations.get(reading.station_id)
            name = station.resident_name if station is not None else t("ledger.unknown_resident")
            lines.append(
                LedgerLine(
                    reading.reading_date,
                    t("categories.charging"),
                    t("ledger.charging_bill", name=name),
                    LineKind.INCOME,
                    amount,
                )
            )

    for expense in snapshot.committee_expenses:
        amount = record_amount(expense, "amount", "committee expense")
        if amount is not None and committee_expense_in_period(expense, period):
            lines.append(LedgerLine(expense.date, expense.category, expense.description, LineKind.EXPENSE, amount))

    # Undated lines go last
    dated = sorted((line for line in lines if line.date is not None), key=lambda line: line.date, reverse=True)
    return dated + [line for line in lines if line.date is None]


class BalanceService:
    """Fetch the ledgers and reconcile balances; every call reads a fresh snapshot."""

    def __init__(self, reader: LedgerReader):
        self.reader = reader

    async def compute_monthly(self, month: int, year: int) -> MonthlySummary:
        snapshot = await load_balance_snapshot(self.reader)
        return compute_monthly(snapshot, month, year)

    async def compute_cumulative(self) -> Decimal:
        snapshot = await load_balance_snapshot(self.reader)
        return compute_cumulative(snapshot)

    async def compute_category_breakdown(self, month: int, year: int) -> CategoryBreakdown:
        snapshot = await load_balance_snapshot(self.reader)
        return compute_category_breakdown(snapshot, month, year)

    async def compute_yearly(self, year: int) -> YearlySummary:
        snapshot = await load_balance_snapshot(self.reader)
        return compute_yearly(snapshot, year)


__all__ = [
    "BalanceService",
    "CategoryBreakdown",
    "CategoryRollup",
    "LedgerLine",
    "LineKind",
    "MonthlySummary",
    "YearlySummary",
    "committee_expense_in_period",
    "committee_income_in_period",
    "compute_category_breakdown",
    "compute_cumulative",
    "compute_expense_breakdown",
    "compute_income_breakdown",
    "compute_monthly",
    "compute_yearly",
    "fee_payment_in_period",
    "meter_reading_in_period",
    "monthly_ledger_lines",
]
