"""Calendar periods shared by the debt and balance engines."""

from datetime import datetime
from typing import NamedTuple

from vaad.services.errors import InvalidPeriodError
from vaad.services.locale_service import is_valid_month, month_label

MIN_YEAR = 1900
MAX_YEAR = 9999


class ReportPeriod(NamedTuple):
    """A calendar month of a report (month is 1-indexed)."""

    month: int
    year: int

    @classmethod
    def of(cls, month: int, year: int) -> "ReportPeriod":
        """Build a validated period.

        Raises:
            InvalidPeriodError: If month is outside 1..12 or year is not plausible
        """
        if not is_valid_month(month):
            raise InvalidPeriodError(f"Month must be between 1 and 12, got {month!r}")
        if not isinstance(year, int) or not MIN_YEAR <= year <= MAX_YEAR:
            raise InvalidPeriodError(f"Year out of range: {year!r}")
        return cls(month, year)

    @classmethod
    def containing(cls, moment: datetime) -> "ReportPeriod":
        return cls(moment.month, moment.year)

    def previous(self) -> "ReportPeriod":
        if self.month == 1:
            return ReportPeriod(12, self.year - 1)
        return ReportPeriod(self.month - 1, self.year)

    def next(self) -> "ReportPeriod":
        if self.month == 12:
            return ReportPeriod(1, self.year + 1)
        return ReportPeriod(self.month + 1, self.year)

    def contains(self, moment: datetime | None) -> bool:
        """Whether a timestamp falls inside this calendar month."""
        if moment is None:
            return False
        return moment.year == self.year and moment.month == self.month

    @property
    def label(self) -> str:
        return month_label(self.month, self.year)


def is_obligation_due(month: int, year: int, now: datetime) -> bool:
    """An obligation for (month, year) is due from the first day of that month.

    Due iff the year is past, or it is the current year and the month has
    started. The current month counts in full, it is never pro-rated.
    """
    if year < now.year:
        return True
    return year == now.year and month <= now.month


__all__ = ["ReportPeriod", "is_obligation_due"]
