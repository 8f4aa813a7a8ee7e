"""
Daily usage accounting for conversion runs.
"""

from datetime import date, datetime
from typing import Callable, Optional


class QuotaExceeded(Exception):
    """Raised when the daily usage limit has been reached."""
    pass


class DailyUsageCounter:
    """
    In-memory counter of runs per calendar day.

    The current time comes from an injectable clock so the day rollover can
    be driven from tests. Nothing is persisted.
    """

    DEFAULT_LIMIT = 80
    DEFAULT_WARNING_AT = 60

    def __init__(
        self,
        limit: int = DEFAULT_LIMIT,
        warning_at: int = DEFAULT_WARNING_AT,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            limit: Runs allowed per day.
            warning_at: Usage level at which ``is_warning`` turns on.
            clock: Callable returning the current datetime (defaults to now).
        """
        if limit <= 0:
            raise ValueError(f"Limit must be positive, got {limit}")
        if not 0 <= warning_at <= limit:
            raise ValueError(f"Warning level must be between 0 and {limit}, got {warning_at}")

        self.limit = limit
        self.warning_at = warning_at
        self._clock = clock or datetime.now
        self._date: date = self._today()
        self._count = 0

    def _today(self) -> date:
        return self._clock().date()

    def _rollover(self) -> None:
        today = self._today()
        if today != self._date:
            self._date = today
            self._count = 0

    def record(self, n: int = 1) -> int:
        """Add ``n`` runs to today's count and return the new total."""
        if n < 0:
            raise ValueError(f"Cannot record a negative count: {n}")
        self._rollover()
        self._count += n
        return self._count

    def check(self) -> None:
        """Raise QuotaExceeded if no runs are left today."""
        if self.is_exhausted:
            raise QuotaExceeded(
                f"Daily limit of {self.limit} runs reached for {self._date.isoformat()}"
            )

    def reset(self) -> None:
        self._date = self._today()
        self._count = 0

    @property
    def used(self) -> int:
        self._rollover()
        return self._count

    @property
    def remaining(self) -> int:
        return max(self.limit - self.used, 0)

    @property
    def is_warning(self) -> bool:
        return self.used >= self.warning_at

    @property
    def is_exhausted(self) -> bool:
        return self.used >= self.limit

    def snapshot(self) -> dict:
        """Usage summary in the shape of the admin usage report."""
        used = self.used
        return {
            "date": self._date.isoformat(),
            "used": used,
            "limit": self.limit,
            "remaining": max(self.limit - used, 0),
            "warningAt": self.warning_at,
        }
