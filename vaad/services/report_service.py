"""Report facade for screens, exports and the reminder job.

Loads one snapshot per request and runs the engines on it. A failed fetch
surfaces as a single FinancialDataUnavailableError; callers never receive
partially summed totals.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from vaad.services.balance_service import (
    CategoryRollup,
    LedgerLine,
    MonthlySummary,
    YearlySummary,
    compute_cumulative,
    compute_expense_breakdown,
    compute_income_breakdown,
    compute_monthly,
    compute_yearly,
    monthly_ledger_lines,
)
from vaad.services.debt_service import ResidentDebt, compute_debts
from vaad.services.errors import FinancialDataUnavailableError
from vaad.services.ledger_reader import LedgerReader, load_balance_snapshot, load_debt_snapshot
from vaad.services.periods import ReportPeriod

logger = logging.getLogger(__name__)


@dataclass
class MonthlyReport:
    """Everything the monthly report screen and exports print."""

    summary: MonthlySummary
    income_by_category: list[CategoryRollup]
    expense_by_category: list[CategoryRollup]
    cumulative_balance: Decimal
    lines: list[LedgerLine]


@dataclass
class YearlyReport:
    summary: YearlySummary
    cumulative_balance: Decimal


class FinancialReportService:
    """Entry point for every consumer of financial figures."""

    def __init__(self, reader: LedgerReader):
        self.reader = reader

    async def load_debt_report(self, now: datetime, include_unrecorded_months: bool = False) -> list[ResidentDebt]:
        """Resident debts as of ``now``.

        Raises:
            FinancialDataUnavailableError: If any ledger could not be read
        """
        try:
            snapshot = await load_debt_snapshot(self.reader, include_paid_fees=include_unrecorded_months)
        except Exception as e:
            logger.error("Failed to load debt ledgers: %s", e, exc_info=True)
            raise FinancialDataUnavailableError() from e
        return compute_debts(snapshot, now, include_unrecorded_months=include_unrecorded_months)

    async def load_monthly_report(self, month: int, year: int) -> MonthlyReport:
        """Monthly summary, category rollups, transaction lines and cumulative balance.

        Raises:
            InvalidPeriodError: If month/year is out of range (checked before any fetch)
            FinancialDataUnavailableError: If any ledger could not be read
        """
        period = ReportPeriod.of(month, year)
        try:
            snapshot = await load_balance_snapshot(self.reader)
        except Exception as e:
            logger.error("Failed to load balance ledgers for %s/%s: %s", month, year, e, exc_info=True)
            raise FinancialDataUnavailableError() from e

        return MonthlyReport(
            summary=compute_monthly(snapshot, period.month, period.year),
            income_by_category=compute_income_breakdown(snapshot, period.month, period.year),
            expense_by_category=compute_expense_breakdown(snapshot, period.month, period.year),
            cumulative_balance=compute_cumulative(snapshot),
            lines=monthly_ledger_lines(snapshot, period.month, period.year),
        )

    async def load_yearly_report(self, year: int) -> YearlyReport:
        """Yearly summary and cumulative balance.

        Raises:
            InvalidPeriodError: If year is out of range
            FinancialDataUnavailableError: If any ledger could not be read
        """
        ReportPeriod.of(1, year)
        try:
            snapshot = await load_balance_snapshot(self.reader)
        except Exception as e:
            logger.error("Failed to load balance ledgers for %s: %s", year, e, exc_info=True)
            raise FinancialDataUnavailableError() from e

        return YearlyReport(summary=compute_yearly(snapshot, year), cumulative_balance=compute_cumulative(snapshot))


__all__ = ["FinancialReportService", "MonthlyReport", "YearlyReport"]
