"""Integration tests: SQL ledger reader and maintenance service over SQLite."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from factories import (
    make_expense,
    make_fee,
    make_income,
    make_pending,
    make_reading,
    make_resident,
    make_station,
    make_task,
)

from vaad.models import EmailSettings
from vaad.models.periodic_maintenance import MaintenanceFrequency
from vaad.services.debt_service import DebtService
from vaad.services.errors import MaintenanceTaskNotFoundError
from vaad.services.ledger_reader import SqlLedgerReader, load_balance_snapshot, load_debt_snapshot
from vaad.services.maintenance_service import PeriodicMaintenanceService
from vaad.services.report_service import FinancialReportService

NOW = datetime(2024, 3, 15)


@pytest.fixture
async def seeded(session_factory, settings):
    """Database with two residents, their ledgers and building settings."""
    async with session_factory() as session:
        session.add_all(
            [
                settings,
                make_resident(1, name="Dana", apartment_number="4", email="dana@example.com"),
                make_resident(2, name="Avi", apartment_number="7", is_active=False),
                make_station(10, " 4"),
                EmailSettings(id=1, schedule_day=20, schedule_hour=9, is_enabled=True, excluded_resident_ids=[]),
            ]
        )
        await session.flush()
        session.add_all(
            [
                make_fee(1, 1, 2, 2024),
                make_fee(2, 1, 3, 2024),
                make_fee(3, 1, 1, 2024, is_paid=True, payment_date=datetime(2024, 1, 10)),
                make_fee(4, 2, 2, 2024),
                make_pending(1, 1, Decimal("120.50")),
                make_reading(1, 10, 2, 2024, Decimal("35.20")),
                make_reading(2, 10, 1, 2024, Decimal("40"), is_paid=True),
                make_income(1, Decimal("200"), datetime(2024, 1, 20)),
                make_income(2, Decimal("999"), datetime(2024, 1, 21), is_paid=False),
                make_expense(1, Decimal("300"), datetime(2024, 1, 25)),
            ]
        )
        await session.commit()
    return session_factory


class TestSqlLedgerReader:
    """Test fetch filters against a real schema."""

    async def test_active_residents(self, seeded):
        residents = await SqlLedgerReader(seeded).get_all_active_residents()

        assert [r.name for r in residents] == ["Dana"]

    async def test_paid_filters(self, seeded):
        reader = SqlLedgerReader(seeded)

        assert [f.id for f in await reader.get_unpaid_fee_payments()] == [1, 2, 4]
        assert [f.id for f in await reader.get_all_paid_fee_payments()] == [3]
        assert [r.id for r in await reader.get_unpaid_meter_readings()] == [1]
        assert [r.id for r in await reader.get_all_paid_meter_readings()] == [2]
        assert [i.id for i in await reader.get_all_paid_committee_income()] == [1]
        assert len(await reader.get_all_committee_expenses()) == 1

    async def test_settings(self, seeded):
        reader = SqlLedgerReader(seeded)

        settings = await reader.get_settings()
        email_settings = await reader.get_email_settings()

        assert settings.personal_balance == Decimal("5000")
        assert email_settings.excluded_resident_ids == []

    async def test_settings_missing(self, session_factory):
        assert await SqlLedgerReader(session_factory).get_settings() is None

    async def test_debt_snapshot(self, seeded):
        snapshot = await load_debt_snapshot(SqlLedgerReader(seeded))

        assert len(snapshot.residents) == 1
        assert snapshot.default_monthly_fee == Decimal("300")
        assert snapshot.paid_fee_payments == ()

    async def test_balance_snapshot(self, seeded):
        snapshot = await load_balance_snapshot(SqlLedgerReader(seeded))

        assert snapshot.personal_balance == Decimal("5000")
        assert len(snapshot.charging_stations) == 1


class TestReportsOverSql:
    """Test the engines end to end on stored records."""

    async def test_debts(self, seeded):
        debts = await DebtService(SqlLedgerReader(seeded)).compute_debts(NOW)

        assert len(debts) == 1
        debt = debts[0]
        assert len(debt.committee_fees) == 2
        assert debt.total_debt == Decimal("900") + Decimal("120.50") + Decimal("35.20")

    async def test_reminder_recipients(self, seeded):
        recipients = await DebtService(SqlLedgerReader(seeded)).get_reminder_recipients(NOW)

        assert [debt.resident.name for debt in recipients] == ["Dana"]

    async def test_monthly_report(self, seeded):
        report = await FinancialReportService(SqlLedgerReader(seeded)).load_monthly_report(1, 2024)

        # income 200 + fee 450 + charging 40 - expense 300
        assert report.summary.monthly_balance == Decimal("390")
        assert report.cumulative_balance == Decimal("5390")


class TestPeriodicMaintenanceService:
    """Test maintenance persistence."""

    @pytest.fixture
    async def tasks(self, session_factory):
        async with session_factory() as session:
            session.add_all(
                [
                    make_task(1, MaintenanceFrequency.WEEKLY, NOW + timedelta(days=3), title="Stairs cleaning"),
                    make_task(2, MaintenanceFrequency.ANNUAL, NOW + timedelta(days=100), title="Fire extinguishers"),
                    make_task(3, MaintenanceFrequency.MONTHLY, NOW - timedelta(days=2), title="Elevator"),
                    make_task(4, MaintenanceFrequency.MONTHLY, NOW, is_active=False, title="Garden"),
                ]
            )
            await session.commit()
        return session_factory

    async def test_list_tasks_sorted_by_due(self, tasks):
        async with tasks() as session:
            listed = await PeriodicMaintenanceService(session).list_tasks()

        assert [task.id for task in listed] == [3, 4, 1, 2]

    async def test_list_active_only(self, tasks):
        async with tasks() as session:
            listed = await PeriodicMaintenanceService(session).list_tasks(active_only=True)

        assert 4 not in [task.id for task in listed]

    async def test_get_upcoming(self, tasks):
        async with tasks() as session:
            upcoming = await PeriodicMaintenanceService(session).get_upcoming(NOW)

        assert [task.id for task in upcoming] == [3, 1]

    async def test_mark_as_performed_persists(self, tasks):
        async with tasks() as session:
            await PeriodicMaintenanceService(session).mark_as_performed(1, NOW)

        async with tasks() as session:
            task = await PeriodicMaintenanceService(session).get_by_id(1)

        assert task.last_performed == NOW
        assert task.next_due == NOW + timedelta(days=7)
        assert task.frequency == MaintenanceFrequency.WEEKLY

    async def test_set_active_keeps_due_date(self, tasks):
        async with tasks() as session:
            task = await PeriodicMaintenanceService(session).set_active(4, True)

        assert task.is_active
        assert task.next_due == NOW

    async def test_unknown_task(self, tasks):
        async with tasks() as session:
            with pytest.raises(MaintenanceTaskNotFoundError, match="42"):
                await PeriodicMaintenanceService(session).get_by_id(42)

    async def test_sql_reader_maintenance(self, tasks):
        listed = await SqlLedgerReader(tasks).get_periodic_maintenance(active_only=True)

        assert [task.id for task in listed] == [3, 1, 2]
