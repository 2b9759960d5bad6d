"""Client-side fixed-window request quota."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Callable

from .errors import QuotaExceeded, WindyClientError

LOGGER = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class QuotaStatus:
    """Snapshot of the quota window returned by :meth:`QuotaTracker.get_remaining_quota`."""

    remaining: int
    resets_at: datetime


class QuotaTracker:
    """Fixed-window request counter.

    The window is reset lazily: every access compares the clock with the stored
    window end, so no timer runs between calls. ``check_limit`` and
    ``get_remaining_quota`` share the same reset rule.
    """

    def __init__(
        self,
        max_requests: int,
        *,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        now: Callable[[], float] | None = None,
    ) -> None:
        if max_requests < 0:
            raise ValueError("max_requests must be non-negative")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self._max_requests = int(max_requests)
        self._window_seconds = float(window_seconds)
        self._now = now or time.time
        self._lock = threading.Lock()
        self._count = 0
        self._window_end = self._now() + self._window_seconds

    @property
    def max_requests(self) -> int:
        return self._max_requests

    def check_limit(self) -> None:
        """Consume one request slot or raise a quota-exceeded failure."""

        with self._lock:
            self._roll_window()
            if self._count >= self._max_requests:
                resets_at = _to_datetime(self._window_end)
                LOGGER.warning(
                    "Request quota of %s exhausted; window resets at %s",
                    self._max_requests,
                    resets_at.isoformat(),
                )
                raise WindyClientError(
                    QuotaExceeded(
                        message=f"Rate limit exceeded. Resets at {resets_at.isoformat()}",
                        resets_at=resets_at,
                    )
                )
            self._count += 1

    def get_remaining_quota(self) -> QuotaStatus:
        """Return remaining requests in the current window without consuming one."""

        with self._lock:
            self._roll_window()
            return QuotaStatus(
                remaining=max(0, self._max_requests - self._count),
                resets_at=_to_datetime(self._window_end),
            )

    def _roll_window(self) -> None:
        now = self._now()
        if now >= self._window_end:
            self._count = 0
            self._window_end = now + self._window_seconds


def _to_datetime(timestamp: float) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=UTC)


__all__ = ["DEFAULT_WINDOW_SECONDS", "QuotaStatus", "QuotaTracker"]
