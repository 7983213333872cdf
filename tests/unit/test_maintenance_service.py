"""Unit tests for the periodic maintenance recurrence rules."""

from datetime import datetime, timedelta

import pytest
from factories import make_task

from vaad.models.periodic_maintenance import MaintenanceFrequency
from vaad.services.localizer import t
from vaad.services.maintenance_service import (
    FREQUENCY_DAYS,
    DueStatus,
    days_until_due,
    describe_due,
    due_status,
    frequency_label,
    is_upcoming,
    mark_as_performed,
    next_due_after,
    set_active,
    upcoming_tasks,
)

NOW = datetime(2024, 3, 15, 10, 0)


class TestNextDueAfter:
    """Test fixed-day recurrence."""

    def test_weekly(self):
        assert next_due_after(MaintenanceFrequency.WEEKLY, datetime(2024, 1, 1)) == datetime(2024, 1, 8)

    def test_monthly_is_thirty_days(self):
        """Test that monthly is 30 days, not a calendar month."""
        assert next_due_after(MaintenanceFrequency.MONTHLY, datetime(2024, 1, 31)) == datetime(2024, 3, 1)

    @pytest.mark.parametrize(
        "frequency,days",
        [
            (MaintenanceFrequency.WEEKLY, 7),
            (MaintenanceFrequency.MONTHLY, 30),
            (MaintenanceFrequency.QUARTERLY, 90),
            (MaintenanceFrequency.SEMI_ANNUAL, 180),
            (MaintenanceFrequency.ANNUAL, 365),
        ],
    )
    def test_frequency_days(self, frequency, days):
        assert FREQUENCY_DAYS[frequency] == days
        assert next_due_after(frequency, NOW) - NOW == timedelta(days=days)

    def test_accepts_stored_string(self):
        assert next_due_after("quarterly", datetime(2024, 1, 1)) == datetime(2024, 3, 31)

    def test_unknown_frequency(self):
        with pytest.raises(ValueError):
            next_due_after("hourly", NOW)


class TestMarkAsPerformed:
    def test_updates_only_schedule(self):
        task = make_task(1, MaintenanceFrequency.WEEKLY, datetime(2024, 1, 3))

        mark_as_performed(task, datetime(2024, 1, 1))

        assert task.last_performed == datetime(2024, 1, 1)
        assert task.next_due == datetime(2024, 1, 8)
        assert task.is_active
        assert task.title == "Elevator service"

    def test_performed_late(self):
        """Test that the next occurrence counts from when it was done."""
        task = make_task(1, MaintenanceFrequency.MONTHLY, datetime(2024, 2, 1))

        mark_as_performed(task, NOW)

        assert task.next_due == NOW + timedelta(days=30)


class TestSetActive:
    def test_due_date_unchanged(self):
        due = datetime(2024, 4, 1)
        task = make_task(1, MaintenanceFrequency.ANNUAL, due)

        set_active(task, False)
        assert not task.is_active
        assert task.next_due == due

        set_active(task, True)
        assert task.is_active
        assert task.next_due == due


class TestIsUpcoming:
    """Test the 30-day alert window."""

    def test_within_window(self):
        assert is_upcoming(make_task(1, MaintenanceFrequency.MONTHLY, NOW + timedelta(days=10)), NOW)

    def test_window_boundary(self):
        assert is_upcoming(make_task(1, MaintenanceFrequency.MONTHLY, NOW + timedelta(days=30)), NOW)
        assert not is_upcoming(make_task(1, MaintenanceFrequency.MONTHLY, NOW + timedelta(days=30, seconds=1)), NOW)

    def test_overdue_is_upcoming(self):
        assert is_upcoming(make_task(1, MaintenanceFrequency.MONTHLY, NOW - timedelta(days=5)), NOW)

    def test_inactive_never_upcoming(self):
        task = make_task(1, MaintenanceFrequency.MONTHLY, NOW - timedelta(days=5), is_active=False)

        assert not is_upcoming(task, NOW)

    def test_upcoming_tasks_sorted(self):
        later = make_task(1, MaintenanceFrequency.MONTHLY, NOW + timedelta(days=20))
        overdue = make_task(2, MaintenanceFrequency.WEEKLY, NOW - timedelta(days=2))
        far = make_task(3, MaintenanceFrequency.ANNUAL, NOW + timedelta(days=200))
        inactive = make_task(4, MaintenanceFrequency.WEEKLY, NOW, is_active=False)

        assert upcoming_tasks([later, overdue, far, inactive], NOW) == [overdue, later]


class TestDueStatus:
    """Test due-date classification and labels."""

    def test_days_until_due_rounds_up(self):
        assert days_until_due(make_task(1, MaintenanceFrequency.WEEKLY, NOW + timedelta(hours=1)), NOW) == 1
        assert days_until_due(make_task(1, MaintenanceFrequency.WEEKLY, NOW - timedelta(days=3)), NOW) == -3
        assert days_until_due(make_task(1, MaintenanceFrequency.WEEKLY, NOW), NOW) == 0

    @pytest.mark.parametrize(
        "offset,status",
        [
            (timedelta(days=-2), DueStatus.OVERDUE),
            (timedelta(0), DueStatus.DUE_TODAY),
            (timedelta(days=7), DueStatus.DUE_SOON),
            (timedelta(days=8), DueStatus.SCHEDULED),
        ],
    )
    def test_due_status(self, offset, status):
        assert due_status(make_task(1, MaintenanceFrequency.WEEKLY, NOW + offset), NOW) == status

    def test_describe_due(self):
        assert describe_due(make_task(1, MaintenanceFrequency.WEEKLY, NOW - timedelta(days=2)), NOW) == t(
            "maintenance.overdue", days=2
        )
        assert describe_due(make_task(1, MaintenanceFrequency.WEEKLY, NOW), NOW) == t("maintenance.today")
        assert describe_due(make_task(1, MaintenanceFrequency.WEEKLY, NOW + timedelta(days=1)), NOW) == t(
            "maintenance.tomorrow"
        )
        assert describe_due(make_task(1, MaintenanceFrequency.WEEKLY, NOW + timedelta(days=5)), NOW) == t(
            "maintenance.in_days", days=5
        )

    def test_frequency_label(self):
        assert frequency_label(MaintenanceFrequency.SEMI_ANNUAL) == "חצי שנתי"
        assert frequency_label("weekly") == "שבועי"
