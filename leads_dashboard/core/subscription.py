"""Visibility subscription used to drive infinite scrolling."""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class VisibilitySubscription:
    """Notify once when the watched element becomes visible, then wait to be re-armed."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._callback: Optional[Callable[[], None]] = None
        self._armed = False

    @property
    def armed(self) -> bool:
        with self._lock:
            return self._armed and self._callback is not None

    def observe(self, callback: Callable[[], None]) -> None:
        with self._lock:
            self._callback = callback
            self._armed = True

    def disconnect(self) -> None:
        with self._lock:
            self._callback = None
            self._armed = False

    def rearm(self) -> None:
        with self._lock:
            if self._callback is not None:
                self._armed = True

    def notify(self, visible: bool) -> bool:
        """Feed a visibility signal; returns True when the callback fired."""
        with self._lock:
            if not visible or not self._armed or self._callback is None:
                return False
            self._armed = False
            callback = self._callback
        logger.debug("Sentinel became visible; firing subscription")
        callback()
        return True
