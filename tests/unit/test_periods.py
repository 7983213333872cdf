"""Tests for report periods and obligation due rules."""

from datetime import datetime

import pytest

from vaad.services.errors import InvalidPeriodError
from vaad.services.locale_service import month_label
from vaad.services.periods import ReportPeriod, is_obligation_due


class TestReportPeriod:
    """Test period construction and navigation."""

    def test_of_valid(self):
        assert ReportPeriod.of(3, 2024) == ReportPeriod(3, 2024)

    @pytest.mark.parametrize("month", [0, 13, -1, "3", None, True])
    def test_of_invalid_month(self, month):
        """Test that months outside 1..12 are rejected."""
        with pytest.raises(InvalidPeriodError, match="Month must be between 1 and 12"):
            ReportPeriod.of(month, 2024)

    @pytest.mark.parametrize("year", [0, 1899, 10000, "2024"])
    def test_of_invalid_year(self, year):
        with pytest.raises(InvalidPeriodError, match="Year out of range"):
            ReportPeriod.of(1, year)

    def test_invalid_period_is_value_error(self):
        """Test that callers catching ValueError also catch period errors."""
        with pytest.raises(ValueError):
            ReportPeriod.of(13, 2024)

    def test_containing(self):
        assert ReportPeriod.containing(datetime(2024, 4, 30, 23, 59)) == ReportPeriod(4, 2024)

    def test_previous_wraps_year(self):
        assert ReportPeriod(1, 2024).previous() == ReportPeriod(12, 2023)
        assert ReportPeriod(5, 2024).previous() == ReportPeriod(4, 2024)

    def test_next_wraps_year(self):
        assert ReportPeriod(12, 2023).next() == ReportPeriod(1, 2024)
        assert ReportPeriod(5, 2024).next() == ReportPeriod(6, 2024)

    def test_contains(self):
        period = ReportPeriod(4, 2024)
        assert period.contains(datetime(2024, 4, 1))
        assert period.contains(datetime(2024, 4, 30, 23, 59, 59))
        assert not period.contains(datetime(2024, 5, 1))
        assert not period.contains(datetime(2023, 4, 15))
        assert not period.contains(None)

    def test_label(self):
        assert ReportPeriod(3, 2024).label == month_label(3, 2024)


class TestIsObligationDue:
    """Test the 'due from the first day of the month' rule."""

    NOW = datetime(2024, 3, 15)

    def test_past_year_is_due(self):
        assert is_obligation_due(12, 2023, self.NOW)

    def test_earlier_month_same_year_is_due(self):
        assert is_obligation_due(1, 2024, self.NOW)
        assert is_obligation_due(2, 2024, self.NOW)

    def test_current_month_is_due_in_full(self):
        """Test that the current month counts even mid-month."""
        assert is_obligation_due(3, 2024, self.NOW)
        assert is_obligation_due(3, 2024, datetime(2024, 3, 1))

    def test_future_month_is_not_due(self):
        assert not is_obligation_due(4, 2024, self.NOW)

    def test_future_year_is_not_due(self):
        assert not is_obligation_due(1, 2025, self.NOW)
