"""Local substring filtering and input debouncing."""

import logging
import threading
from typing import Any, Callable, List, Optional, Sequence

from leads_dashboard.models import Record

logger = logging.getLogger(__name__)

FILTER_FIELDS = ("name", "address", "category", "phone")
QUIET_PERIOD_SECONDS = 0.3


def filter_records(records: Sequence[Record], query: str, fields: Sequence[str] = FILTER_FIELDS) -> List[Record]:
    """Keep records where any of ``fields`` contains ``query``, ignoring case."""
    if not query or not query.strip():
        return list(records)

    needle = query.lower()
    matched = []
    for record in records:
        for field in fields:
            value = record.get(field)
            if value and needle in str(value).lower():
                matched.append(record)
                break
    return matched


class Debouncer:
    """Run ``action`` once input has been quiet for ``delay`` seconds.

    Every ``trigger`` cancels the pending timer and schedules a new one, so only
    the last call within a burst executes.
    """

    def __init__(
        self,
        action: Callable[..., Any],
        delay: float = QUIET_PERIOD_SECONDS,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ) -> None:
        self._action = action
        self._delay = delay
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._pending_args: tuple = ()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self, *args: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._pending_args = args
            timer = self._timer_factory(self._delay, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._generation += 1

    def flush(self) -> bool:
        """Run the pending action immediately; returns False if nothing was pending."""
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            generation = self._generation
        return self._fire(generation)

    def _fire(self, generation: int) -> bool:
        with self._lock:
            # A newer trigger or a cancel superseded this timer.
            if generation != self._generation or self._timer is None:
                return False
            self._timer = None
            args = self._pending_args
        self._action(*args)
        return True
