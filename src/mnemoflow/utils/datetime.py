"""Datetime utilities and the time source used by services."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

SECONDS_PER_DAY = 86400.0


def utc_now() -> datetime:
    """Get current UTC datetime.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def parse_datetime_utc(dt_str: Optional[str]) -> Optional[datetime]:
    """Parse datetime string and ensure it's timezone-aware (UTC).

    Args:
        dt_str: ISO format datetime string, or None

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if not dt_str:
        return None
    dt = datetime.fromisoformat(dt_str)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def age_in_days(created_at: datetime, now: datetime) -> float:
    """Fractional days elapsed between two instants (negative if created_at is in the future)."""
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - created_at).total_seconds() / SECONDS_PER_DAY


class TimeProvider(ABC):
    """Source of the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        pass


class SystemTimeProvider(TimeProvider):
    """Wall-clock UTC time."""

    def now(self) -> datetime:
        return utc_now()
