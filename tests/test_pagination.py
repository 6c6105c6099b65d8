import pytest

from leads_dashboard.core import pagination
from leads_dashboard.core.pagination import (
    FetchFailed,
    FetchSucceeded,
    LoadMore,
    SearchState,
    SetInputs,
    Submit,
    reduce_search,
)
from leads_dashboard.models import CompanyRow


def rows(*names):
    return tuple(CompanyRow(url=f"https://www.trustpilot.com/review/{n}.com", company_name=n) for n in names)


def test_submit_without_location_sets_error_only():
    state = reduce_search(SearchState(), Submit())
    assert state.error == pagination.MISSING_LOCATION
    assert state.token == 0
    assert not state.loading


def test_submit_resets_window_and_results():
    state = SearchState(location="London, UK", page_from=7, page_to=9, results=rows("a"), has_more=False)
    state = reduce_search(state, Submit())
    assert (state.page_from, state.page_to) == (1, 5)
    assert state.results == ()
    assert state.has_more and state.loading
    assert state.token == 1
    assert state.current_batch == 1


@pytest.mark.parametrize("window", [(1, 5), (1, 1), (3, 4), (12, 17)])
def test_next_window_lower_bound_strictly_increases(window):
    new_from, new_to = pagination.next_window(*window)
    assert new_from > window[0]
    assert new_from == window[1] + 1
    assert new_to == new_from + pagination.WINDOW_INCREMENT


def test_load_more_is_ignored_while_loading_or_exhausted():
    loading = SearchState(location="London, UK", loading=True)
    assert reduce_search(loading, LoadMore()) is loading

    exhausted = SearchState(location="London, UK", has_more=False)
    assert reduce_search(exhausted, LoadMore()) is exhausted

    no_location = SearchState()
    assert reduce_search(no_location, LoadMore()) is no_location


def test_success_appends_and_tracks_has_more():
    state = reduce_search(SearchState(location="London, UK"), Submit())
    state = reduce_search(state, FetchSucceeded(token=state.token, rows=rows("a", "b"), total=0))
    assert [r.company_name for r in state.results] == ["a", "b"]
    assert state.total == 2
    assert state.has_more and not state.loading

    state = reduce_search(state, LoadMore())
    assert (state.page_from, state.page_to) == (6, 11)
    assert state.current_batch == 2
    state = reduce_search(state, FetchSucceeded(token=state.token, rows=rows("b"), total=40))
    # Duplicates across windows are kept.
    assert [r.company_name for r in state.results] == ["a", "b", "b"]
    assert state.total == 40

    state = reduce_search(state, LoadMore())
    state = reduce_search(state, FetchSucceeded(token=state.token, rows=(), total=40))
    assert state.has_more is False
    assert reduce_search(state, LoadMore()) is state


def test_stale_responses_are_discarded():
    state = reduce_search(SearchState(location="London, UK"), Submit())
    stale_token = state.token
    state = reduce_search(state, SetInputs(location="Paris, France"))
    state = reduce_search(state, Submit())

    after = reduce_search(state, FetchSucceeded(token=stale_token, rows=rows("old"), total=1))
    assert after is state
    assert reduce_search(state, FetchFailed(token=stale_token, message="boom")) is state


def test_failure_keeps_last_good_results():
    state = reduce_search(SearchState(location="London, UK"), Submit())
    state = reduce_search(state, FetchSucceeded(token=state.token, rows=rows("a"), total=1))
    state = reduce_search(state, LoadMore())
    state = reduce_search(state, FetchFailed(token=state.token, message="timeout"))
    assert state.error == "timeout"
    assert not state.loading
    assert [r.company_name for r in state.results] == ["a"]


def test_unknown_event_raises():
    with pytest.raises(TypeError):
        reduce_search(SearchState(), object())
