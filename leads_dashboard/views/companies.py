"""TrustPilot company search view with infinite-scroll pagination."""

import logging
import threading
from datetime import datetime
from typing import Optional

from leads_dashboard.core.config import ConfigError, require_api_base_url
from leads_dashboard.core.pagination import (
    Event,
    FetchFailed,
    FetchSucceeded,
    LoadMore,
    SearchState,
    SetInputs,
    Submit,
    ValidationFailed,
    reduce_search,
)
from leads_dashboard.core.subscription import VisibilitySubscription
from leads_dashboard.etl import export
from leads_dashboard.etl.transform import company_export_records, to_company_rows
from leads_dashboard.models import ExportResult
from leads_dashboard.vendors import scrape_api

logger = logging.getLogger(__name__)


class CompanySearchView:
    """Holds one search session; every transition goes through ``reduce_search``."""

    def __init__(self, state: Optional[SearchState] = None) -> None:
        self._lock = threading.Lock()
        self._state = state or SearchState()
        self._sentinel: Optional[VisibilitySubscription] = None

    @property
    def state(self) -> SearchState:
        with self._lock:
            return self._state

    def dispatch(self, event: Event) -> SearchState:
        with self._lock:
            self._state = reduce_search(self._state, event)
            return self._state

    def set_inputs(self, **changes) -> SearchState:
        return self.dispatch(SetInputs(**changes))

    def submit(self) -> SearchState:
        """Reset the window to the first pages and fetch them."""
        try:
            require_api_base_url()
        except ConfigError as exc:
            return self.dispatch(ValidationFailed(str(exc)))
        return self._start(Submit())

    def load_more(self) -> SearchState:
        """Fetch the next window; a no-op while loading or once pages run out."""
        return self._start(LoadMore())

    def attach_sentinel(self, subscription: VisibilitySubscription) -> None:
        if self._sentinel is not None:
            self._sentinel.disconnect()
        self._sentinel = subscription
        subscription.observe(self._on_sentinel_visible)

    def detach_sentinel(self) -> None:
        if self._sentinel is not None:
            self._sentinel.disconnect()
            self._sentinel = None

    def _on_sentinel_visible(self) -> None:
        # While a fetch is in flight this is a no-op; that fetch re-arms on completion.
        self.load_more()

    def _rearm_sentinel(self, state: SearchState) -> None:
        if self._sentinel is not None and state.has_more and not state.loading:
            self._sentinel.rearm()

    def _start(self, event: Event) -> SearchState:
        # Check-and-set happens under one lock: only the caller whose event
        # bumps the token issues the request.
        with self._lock:
            previous_token = self._state.token
            self._state = reduce_search(self._state, event)
            state = self._state
        if state.token == previous_token:
            return state
        return self._fetch(state)

    def _fetch(self, state: SearchState) -> SearchState:
        logger.info(
            "Searching companies query=%s location=%s pages=%s-%s batch=%s",
            state.query,
            state.location,
            state.page_from,
            state.page_to,
            state.current_batch,
        )
        try:
            payload = scrape_api.search_companies(
                query=state.query,
                location=state.location,
                frompage=state.page_from,
                topage=state.page_to,
            )
        except (scrape_api.ScrapeApiError, ConfigError) as exc:
            logger.warning("Company search failed: %s", exc)
            new_state = self.dispatch(FetchFailed(token=state.token, message=str(exc)))
            self._rearm_sentinel(new_state)
            return new_state

        rows = tuple(to_company_rows(payload["results"]))
        new_state = self.dispatch(FetchSucceeded(token=state.token, rows=rows, total=payload["total"]))
        if new_state.token != state.token:
            logger.debug("Discarded stale company search response token=%s", state.token)
        self._rearm_sentinel(new_state)
        return new_state

    def export_csv(self, now: Optional[datetime] = None) -> ExportResult:
        state = self.state
        prefix = f"trustpilot-companies-{export.location_slug(state.location)}-"
        return export.export_csv(
            company_export_records(state.results),
            export.dated_filename(prefix, "csv", now),
            empty_warning=export.NO_DOWNLOAD_WARNING,
        )
