"""Recurrence engine for periodic building maintenance.

Next due dates advance by a fixed number of days per frequency. "Monthly" is
30 days, not a calendar month: stored due dates were produced this way.
"""

import logging
import math
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vaad.models.periodic_maintenance import MaintenanceFrequency, PeriodicMaintenance
from vaad.services.errors import MaintenanceTaskNotFoundError
from vaad.services.localizer import t

logger = logging.getLogger(__name__)

FREQUENCY_DAYS: dict[MaintenanceFrequency, int] = {
    MaintenanceFrequency.WEEKLY: 7,
    MaintenanceFrequency.MONTHLY: 30,
    MaintenanceFrequency.QUARTERLY: 90,
    MaintenanceFrequency.SEMI_ANNUAL: 180,
    MaintenanceFrequency.ANNUAL: 365,
}

UPCOMING_WINDOW = timedelta(days=30)
DUE_SOON_DAYS = 7


class DueStatus(str, Enum):
    """Urgency of a task relative to now."""

    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_SOON = "due_soon"
    SCHEDULED = "scheduled"


def next_due_after(frequency: MaintenanceFrequency | str, performed_at: datetime) -> datetime:
    """Due date of the next occurrence after a task was performed.

    Raises:
        ValueError: If frequency is unknown
    """
    return performed_at + timedelta(days=FREQUENCY_DAYS[MaintenanceFrequency(frequency)])


def mark_as_performed(task: Any, now: datetime) -> Any:
    """Record that the task was done now and schedule the next occurrence.

    Only ``last_performed`` and ``next_due`` change.
    """
    task.last_performed = now
    task.next_due = next_due_after(task.frequency, now)
    return task


def set_active(task: Any, active: bool) -> Any:
    """Enable or disable a task. The due date stays where it is."""
    task.is_active = active
    return task


def is_upcoming(task: Any, now: datetime) -> bool:
    """Active and due within 30 days; overdue tasks count as upcoming."""
    return bool(task.is_active) and task.next_due - now <= UPCOMING_WINDOW


def days_until_due(task: Any, now: datetime) -> int:
    """Whole days until due, rounded up; negative when overdue."""
    return math.ceil((task.next_due - now).total_seconds() / 86400)


def due_status(task: Any, now: datetime) -> DueStatus:
    days = days_until_due(task, now)
    if days < 0:
        return DueStatus.OVERDUE
    if days == 0:
        return DueStatus.DUE_TODAY
    if days <= DUE_SOON_DAYS:
        return DueStatus.DUE_SOON
    return DueStatus.SCHEDULED


def describe_due(task: Any, now: datetime) -> str:
    """Localized 'in N days' / 'overdue by N days' text."""
    days = days_until_due(task, now)
    if days < 0:
        return t("maintenance.overdue", days=abs(days))
    if days == 0:
        return t("maintenance.today")
    if days == 1:
        return t("maintenance.tomorrow")
    return t("maintenance.in_days", days=days)


def frequency_label(frequency: MaintenanceFrequency | str) -> str:
    return t(f"maintenance.frequency.{MaintenanceFrequency(frequency).value}")


def upcoming_tasks(tasks: Iterable[Any], now: datetime) -> list[Any]:
    """Tasks for the upcoming-maintenance banner, soonest first."""
    return sorted((task for task in tasks if is_upcoming(task, now)), key=lambda task: task.next_due)


class PeriodicMaintenanceService:
    """Service for periodic maintenance database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize with database session.

        Args:
            session: AsyncSession for database operations
        """
        self.session = session

    async def list_tasks(self, active_only: bool = False) -> list[PeriodicMaintenance]:
        stmt = select(PeriodicMaintenance)
        if active_only:
            stmt = stmt.where(PeriodicMaintenance.is_active.is_(True))
        result = await self.session.execute(stmt.order_by(PeriodicMaintenance.next_due.asc()))
        return list(result.scalars().all())

    async def get_by_id(self, task_id: int) -> PeriodicMaintenance:
        """Get task by ID.

        Raises:
            MaintenanceTaskNotFoundError: If no task has this ID
        """
        stmt = select(PeriodicMaintenance).where(PeriodicMaintenance.id == task_id)
        result = await self.session.execute(stmt)
        task = result.scalar_one_or_none()
        if task is None:
            raise MaintenanceTaskNotFoundError(task_id)
        return task

    async def mark_as_performed(self, task_id: int, now: datetime) -> PeriodicMaintenance:
        """Mark task performed at ``now`` and persist the new due date."""
        task = await self.get_by_id(task_id)
        mark_as_performed(task, now)
        await self.session.commit()

        logger.info(
            "Periodic maintenance %d performed at %s, next due %s",
            task_id,
            now,
            task.next_due,
        )
        return task

    async def set_active(self, task_id: int, active: bool) -> PeriodicMaintenance:
        task = await self.get_by_id(task_id)
        set_active(task, active)
        await self.session.commit()
        logger.info("Periodic maintenance %d active=%s", task_id, active)
        return task

    async def get_upcoming(self, now: datetime) -> list[PeriodicMaintenance]:
        return upcoming_tasks(await self.list_tasks(active_only=True), now)


__all__ = [
    "DueStatus",
    "FREQUENCY_DAYS",
    "PeriodicMaintenanceService",
    "UPCOMING_WINDOW",
    "days_until_due",
    "describe_due",
    "due_status",
    "frequency_label",
    "is_upcoming",
    "mark_as_performed",
    "next_due_after",
    "set_active",
    "upcoming_tasks",
]
