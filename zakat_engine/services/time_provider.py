"""Clock abstraction so history stamps and hawl checks can be frozen in tests.

All times are UTC.
"""
from datetime import date, datetime, timezone
from typing import Optional


class TimeProvider:
    """Source of the current UTC time.

    Usage:
        TimeProvider().now()                               # real clock
        TimeProvider(frozen=datetime(2026, 3, 1, 12, 0))   # fixed instant
    """

    _instance: Optional['TimeProvider'] = None

    def __init__(self, frozen: Optional[datetime] = None):
        if frozen is not None and frozen.tzinfo is None:
            frozen = frozen.replace(tzinfo=timezone.utc)
        self._frozen = frozen

    def now(self) -> datetime:
        if self._frozen is not None:
            return self._frozen
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().date()

    @classmethod
    def get_default(cls) -> 'TimeProvider':
        if cls._instance is None:
            cls._instance = TimeProvider()
        return cls._instance

    @classmethod
    def set_default(cls, provider: 'TimeProvider') -> None:
        cls._instance = provider

    @classmethod
    def reset_default(cls) -> None:
        cls._instance = None


def get_now(time_provider: Optional[TimeProvider] = None) -> datetime:
    return (time_provider or TimeProvider.get_default()).now()


def get_today(time_provider: Optional[TimeProvider] = None) -> date:
    return (time_provider or TimeProvider.get_default()).today()
