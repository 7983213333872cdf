"""Custom exception classes for the bookkeeping engines.

Provides domain-specific exceptions for clear error handling and reporting.
"""


class VaadError(Exception):
    """Base exception for bookkeeping errors."""

    pass


class FinancialDataUnavailableError(VaadError):
    """A ledger fetch failed, so no financial figures can be shown.

    Raised once at the report boundary, chained to the underlying fetch
    error. Callers must not render any partial totals.
    """

    def __init__(self, message: str = "Could not load financial data"):
        self.message = message
        super().__init__(message)


class InvalidPeriodError(VaadError, ValueError):
    """Requested report month/year is out of range."""

    pass


class MaintenanceTaskNotFoundError(VaadError):
    """Periodic maintenance task does not exist."""

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Periodic maintenance task {task_id} not found")
