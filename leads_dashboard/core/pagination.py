"""State and transitions for the windowed TrustPilot company search."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from leads_dashboard.models import DEFAULT_WINDOW, CompanyRow

WINDOW_INCREMENT = 5
MISSING_LOCATION = "Please select a location first"


@dataclass(frozen=True)
class SearchState:
    query: str = "software company"
    location: str = ""
    page_from: int = 1
    page_to: int = 1
    results: Tuple[CompanyRow, ...] = ()
    total: int = 0
    has_more: bool = True
    loading: bool = False
    error: str = ""
    current_batch: int = 1
    token: int = 0


@dataclass(frozen=True)
class SetInputs:
    query: Optional[str] = None
    location: Optional[str] = None
    page_from: Optional[int] = None
    page_to: Optional[int] = None


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class LoadMore:
    pass


@dataclass(frozen=True)
class ValidationFailed:
    message: str


@dataclass(frozen=True)
class FetchSucceeded:
    token: int
    rows: Tuple[CompanyRow, ...]
    total: int


@dataclass(frozen=True)
class FetchFailed:
    token: int
    message: str


Event = Union[SetInputs, Submit, LoadMore, ValidationFailed, FetchSucceeded, FetchFailed]


def next_window(page_from: int, page_to: int) -> Tuple[int, int]:
    """Start right after the current window and end WINDOW_INCREMENT pages later."""
    new_from = page_from + (page_to - page_from + 1)
    return new_from, new_from + WINDOW_INCREMENT


def reduce_search(state: SearchState, event: Event) -> SearchState:
    """Return the state that follows ``event``. A fetch is started when ``token`` changes."""
    if isinstance(event, SetInputs):
        changes = {k: v for k, v in vars(event).items() if v is not None}
        return replace(state, **changes)

    if isinstance(event, ValidationFailed):
        return replace(state, error=event.message)

    if isinstance(event, Submit):
        if not state.location:
            return replace(state, error=MISSING_LOCATION)
        # A new submission supersedes any in-flight request.
        return replace(
            state,
            page_from=DEFAULT_WINDOW[0],
            page_to=DEFAULT_WINDOW[1],
            results=(),
            total=0,
            has_more=True,
            loading=True,
            error="",
            current_batch=1,
            token=state.token + 1,
        )

    if isinstance(event, LoadMore):
        if not state.has_more or state.loading or not state.location:
            return state
        page_from, page_to = next_window(state.page_from, state.page_to)
        return replace(
            state,
            page_from=page_from,
            page_to=page_to,
            loading=True,
            error="",
            current_batch=state.current_batch + 1,
            token=state.token + 1,
        )

    if isinstance(event, FetchSucceeded):
        if event.token != state.token:
            return state
        return replace(
            state,
            results=state.results + tuple(event.rows),
            total=event.total or len(event.rows),
            has_more=len(event.rows) > 0,
            loading=False,
        )

    if isinstance(event, FetchFailed):
        if event.token != state.token:
            return state
        return replace(state, loading=False, error=event.message)

    raise TypeError(f"Unknown search event: {event!r}")
