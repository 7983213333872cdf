"""Report API endpoints (read-only, plus marking maintenance as performed)."""

import logging
import time
from datetime import datetime
from decimal import Decimal
from typing import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vaad.services.balance_service import CategoryRollup, MonthlySummary
from vaad.services.debt_service import DebtItem, ResidentDebt, summarize_debts
from vaad.services.errors import FinancialDataUnavailableError, InvalidPeriodError, MaintenanceTaskNotFoundError
from vaad.services.ledger_reader import SqlLedgerReader
from vaad.services.locale_service import format_amount, get_locale_info
from vaad.services.maintenance_service import (
    PeriodicMaintenanceService,
    days_until_due,
    describe_due,
    due_status,
    frequency_label,
    is_upcoming,
)
from vaad.services.report_service import FinancialReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])


def _log_debug(endpoint: str, start_time: float, **kwargs) -> None:
    """Log API request with timing at DEBUG level."""
    duration_ms = int((time.time() - start_time) * 1000)
    extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
    logger.debug("reports.%s: %sduration_ms=%d", endpoint, f"{extra} " if extra else "", duration_ms)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.session_factory


def get_report_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),  # noqa: B008
) -> FinancialReportService:
    return FinancialReportService(SqlLedgerReader(session_factory))


async def get_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),  # noqa: B008
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


def get_reference_time(now: datetime | None = None) -> datetime:
    """Moment the report is computed for, as naive local time.

    Stored dates carry no offset, so an aware ``now`` (e.g. ending in ``Z``) is
    converted to local time and its offset dropped before any comparison.
    """
    if now is None:
        return datetime.now()
    if now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    return now


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class DebtItemResponse(BaseModel):
    label: str
    amount: Decimal


class ResidentDebtResponse(BaseModel):
    resident_id: int
    resident_name: str
    apartment_number: str
    email: str | None = None
    committee_fees: list[DebtItemResponse]
    pending_payments: list[DebtItemResponse]
    charging_bills: list[DebtItemResponse]
    total_debt: Decimal
    total_debt_formatted: str


class DebtSummaryLineResponse(BaseModel):
    resident_name: str
    apartment_number: str
    total_debt: Decimal
    has_email: bool
    committee_fee_count: int
    committee_fee_total: Decimal
    committee_fee_months: list[str]
    pending_payment_count: int
    charging_bill_count: int


class DebtSummaryResponse(BaseModel):
    total_residents_with_debt: int
    total_debt: Decimal
    total_debt_formatted: str
    debts: list[DebtSummaryLineResponse]


class MonthlySummaryResponse(BaseModel):
    month: int
    year: int
    committee_income: Decimal
    fee_income: Decimal
    charging_income: Decimal
    total_income: Decimal
    total_expense: Decimal
    monthly_balance: Decimal


class CategoryRollupResponse(BaseModel):
    category: str
    amount: Decimal
    percentage: int


class LedgerLineResponse(BaseModel):
    date: datetime | None
    category: str
    description: str
    kind: str
    amount: Decimal


class MonthlyReportResponse(BaseModel):
    summary: MonthlySummaryResponse
    income_by_category: list[CategoryRollupResponse]
    expense_by_category: list[CategoryRollupResponse]
    cumulative_balance: Decimal
    lines: list[LedgerLineResponse]


class YearlyReportResponse(BaseModel):
    year: int
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    cumulative_balance: Decimal
    months: list[MonthlySummaryResponse]


class MaintenanceTaskResponse(BaseModel):
    id: int
    title: str
    frequency: str
    frequency_label: str
    next_due: datetime
    last_performed: datetime | None
    is_active: bool
    is_upcoming: bool
    days_until_due: int
    due_status: str
    due_label: str


def _items(items: list[DebtItem]) -> list[DebtItemResponse]:
    return [DebtItemResponse(label=item.label, amount=item.amount) for item in items]


def _debt_response(debt: ResidentDebt) -> ResidentDebtResponse:
    resident = debt.resident
    return ResidentDebtResponse(
        resident_id=resident.id,
        resident_name=resident.name,
        apartment_number=resident.apartment_number,
        email=resident.email,
        committee_fees=_items(debt.committee_fees),
        pending_payments=_items(debt.pending_payments),
        charging_bills=_items(debt.charging_bills),
        total_debt=debt.total_debt,
        total_debt_formatted=format_amount(debt.total_debt),
    )


def _summary_response(summary: MonthlySummary) -> MonthlySummaryResponse:
    return MonthlySummaryResponse(
        month=summary.period.month,
        year=summary.period.year,
        committee_income=summary.committee_income,
        fee_income=summary.fee_income,
        charging_income=summary.charging_income,
        total_income=summary.total_income,
        total_expense=summary.total_expense,
        monthly_balance=summary.monthly_balance,
    )


def _rollups(rollups: list[CategoryRollup]) -> list[CategoryRollupResponse]:
    return [CategoryRollupResponse(**rollup._asdict()) for rollup in rollups]


def _task_response(task, now: datetime) -> MaintenanceTaskResponse:
    return MaintenanceTaskResponse(
        id=task.id,
        title=task.title,
        frequency=getattr(task.frequency, "value", str(task.frequency)),
        frequency_label=frequency_label(task.frequency),
        next_due=task.next_due,
        last_performed=task.last_performed,
        is_active=task.is_active,
        is_upcoming=is_upcoming(task, now),
        days_until_due=days_until_due(task, now),
        due_status=due_status(task, now).value,
        due_label=describe_due(task, now),
    )


def _unavailable(error: FinancialDataUnavailableError) -> HTTPException:
    return HTTPException(status_code=503, detail=error.message)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/debts", response_model=list[ResidentDebtResponse])
async def get_debts(
    now: datetime = Depends(get_reference_time),  # noqa: B008
    include_unrecorded_months: bool = False,
    service: FinancialReportService = Depends(get_report_service),  # noqa: B008
) -> list[ResidentDebtResponse]:
    """Outstanding debt of every resident who owes money.

    Raises:
        503: Ledgers could not be loaded
    """
    start_time = time.time()
    try:
        debts = await service.load_debt_report(now, include_unrecorded_months)
    except FinancialDataUnavailableError as e:
        raise _unavailable(e) from e
    _log_debug("debts", start_time, count=len(debts))
    return [_debt_response(debt) for debt in debts]


@router.get("/debts/summary", response_model=DebtSummaryResponse)
async def get_debt_summary(
    now: datetime = Depends(get_reference_time),  # noqa: B008
    include_unrecorded_months: bool = False,
    service: FinancialReportService = Depends(get_report_service),  # noqa: B008
) -> DebtSummaryResponse:
    """Building-wide debt overview, totals consistent with /debts for the same parameters."""
    try:
        debts = await service.load_debt_report(now, include_unrecorded_months)
    except FinancialDataUnavailableError as e:
        raise _unavailable(e) from e
    summary = summarize_debts(debts)
    return DebtSummaryResponse(
        total_residents_with_debt=summary.total_residents_with_debt,
        total_debt=summary.total_debt,
        total_debt_formatted=format_amount(summary.total_debt),
        debts=[DebtSummaryLineResponse(**line._asdict()) for line in summary.debts],
    )


@router.get("/monthly", response_model=MonthlyReportResponse)
async def get_monthly_report(
    month: int = Query(...),
    year: int = Query(...),
    service: FinancialReportService = Depends(get_report_service),  # noqa: B008
) -> MonthlyReportResponse:
    """Monthly income/expense report with category rollups and cumulative balance.

    Raises:
        422: Month or year out of range
        503: Ledgers could not be loaded
    """
    start_time = time.time()
    try:
        report = await service.load_monthly_report(month, year)
    except InvalidPeriodError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except FinancialDataUnavailableError as e:
        raise _unavailable(e) from e

    _log_debug("monthly", start_time, month=month, year=year, lines=len(report.lines))
    return MonthlyReportResponse(
        summary=_summary_response(report.summary),
        income_by_category=_rollups(report.income_by_category),
        expense_by_category=_rollups(report.expense_by_category),
        cumulative_balance=report.cumulative_balance,
        lines=[
            LedgerLineResponse(
                date=line.date,
                category=line.category,
                description=line.description,
                kind=line.kind.value,
                amount=line.amount,
            )
            for line in report.lines
        ],
    )


@router.get("/yearly", response_model=YearlyReportResponse)
async def get_yearly_report(
    year: int = Query(...),
    service: FinancialReportService = Depends(get_report_service),  # noqa: B008
) -> YearlyReportResponse:
    """Yearly totals with monthly rows."""
    try:
        report = await service.load_yearly_report(year)
    except InvalidPeriodError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except FinancialDataUnavailableError as e:
        raise _unavailable(e) from e

    summary = report.summary
    return YearlyReportResponse(
        year=summary.year,
        total_income=summary.total_income,
        total_expense=summary.total_expense,
        balance=summary.balance,
        cumulative_balance=report.cumulative_balance,
        months=[_summary_response(month) for month in summary.months],
    )


@router.get("/maintenance", response_model=list[MaintenanceTaskResponse])
async def get_maintenance(
    now: datetime = Depends(get_reference_time),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[MaintenanceTaskResponse]:
    """All periodic maintenance tasks, soonest due first."""
    tasks = await PeriodicMaintenanceService(session).list_tasks()
    return [_task_response(task, now) for task in tasks]


@router.get("/maintenance/upcoming", response_model=list[MaintenanceTaskResponse])
async def get_upcoming_maintenance(
    now: datetime = Depends(get_reference_time),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> list[MaintenanceTaskResponse]:
    """Active tasks due within 30 days (including overdue) for the alert banner."""
    tasks = await PeriodicMaintenanceService(session).get_upcoming(now)
    return [_task_response(task, now) for task in tasks]


@router.post("/maintenance/{task_id}/performed", response_model=MaintenanceTaskResponse)
async def mark_maintenance_performed(
    task_id: int,
    now: datetime = Depends(get_reference_time),  # noqa: B008
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> MaintenanceTaskResponse:
    """Mark a periodic task performed and schedule its next occurrence.

    Raises:
        404: Task not found
    """
    try:
        task = await PeriodicMaintenanceService(session).mark_as_performed(task_id, now)
    except MaintenanceTaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _task_response(task, now)


@router.get("/locale")
async def get_locale() -> dict:
    """Locale, currency and month names used to render the reports."""
    return get_locale_info()


__all__ = ["router"]
