"""Restaurant listing view: fetch, debounced local filter and export."""

import logging
import threading
from datetime import datetime
from typing import List, Optional

from leads_dashboard.core.config import ConfigError
from leads_dashboard.core.filtering import QUIET_PERIOD_SECONDS, Debouncer, filter_records
from leads_dashboard.etl import export
from leads_dashboard.etl.transform import to_restaurant_row
from leads_dashboard.models import ExportResult, Record
from leads_dashboard.vendors import scrape_api

logger = logging.getLogger(__name__)

DEFAULT_QUERY = "restaurants"
DEFAULT_LOCATION = "New York"
DEFAULT_LIMIT = 10
MAX_LIMIT = 1000
LIMIT_WARNING = "Maximum limit allowed is 1000 for performance reasons."


class RestaurantView:
    def __init__(self, limit: int = DEFAULT_LIMIT, quiet_period: float = QUIET_PERIOD_SECONDS) -> None:
        self._lock = threading.Lock()
        self.data: List[Record] = []
        self.filtered: List[Record] = []
        self.search = ""
        self.limit = limit
        self.loading = False
        self.error: Optional[str] = None
        self.warning: Optional[str] = None
        self._applied_search = ""
        self._debouncer = Debouncer(self._apply_search, delay=quiet_period)

    def set_limit(self, value: int) -> int:
        if value > MAX_LIMIT:
            self.warning = LIMIT_WARNING
            value = MAX_LIMIT
        self.limit = value
        return value

    def fetch(self, limit: Optional[int] = None) -> bool:
        """Replace the data set with a fresh search; returns False when skipped or failed."""
        with self._lock:
            if self.loading:
                logger.debug("Restaurant fetch already in flight; ignoring trigger")
                return False
            self.loading = True
            self.error = None
        limit = self.limit if limit is None else limit

        try:
            records = scrape_api.search_by_category(DEFAULT_QUERY, DEFAULT_LOCATION, limit)
        except (scrape_api.ScrapeApiError, ConfigError) as exc:
            logger.warning("Restaurant fetch failed: %s", exc)
            with self._lock:
                self.error = str(exc)
                self.loading = False
            return False

        with self._lock:
            self.data = records
            self.filtered = filter_records(records, self._applied_search)
            self.loading = False
        logger.info("Loaded %d restaurants (limit=%d)", len(records), limit)
        return True

    def on_search_input(self, text: str) -> None:
        self.search = text
        self._debouncer.trigger(text)

    def flush_search(self) -> bool:
        return self._debouncer.flush()

    def _apply_search(self, text: str) -> None:
        with self._lock:
            self._applied_search = text
            self.filtered = filter_records(self.data, text)

    def rows(self) -> List[dict]:
        return [to_restaurant_row(record) for record in self.filtered]

    def export_csv(self, now: Optional[datetime] = None) -> ExportResult:
        return export.export_csv(self.filtered, export.timestamped_filename("restaurants", "csv", now))

    def export_xlsx(self, now: Optional[datetime] = None) -> ExportResult:
        return export.export_xlsx(
            self.filtered,
            export.timestamped_filename("restaurants", "xlsx", now),
            sheet_name="Restaurants",
        )
