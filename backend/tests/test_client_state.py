"""Tests for the client-side list state reducer."""
from __future__ import annotations

import pytest

from linkvault.client import state as s


@pytest.fixture(name="filtered")
def filtered_fixture() -> s.LinkListState:
    state = s.LinkListState()
    state = s.reduce(state, s.SearchChanged("react"))
    state = s.reduce(state, s.TagToggled("web"))
    state = s.reduce(state, s.SortChanged("title", "asc"))
    return state


def test_initial_state_has_no_active_filters():
    state = s.LinkListState()
    assert state.has_active_filters is False
    assert state.query_params() == {"sortBy": "createdAt", "sortOrder": "desc"}


def test_clear_filters_resets_everything(filtered):
    assert filtered.has_active_filters is True
    cleared = s.reduce(filtered, s.FiltersCleared())
    assert cleared.search == ""
    assert cleared.selected_tags == ()
    assert cleared.sort_by == "createdAt"
    assert cleared.sort_order == "desc"
    assert cleared.has_active_filters is False


@pytest.mark.parametrize(
    "action",
    [
        s.SearchChanged("x"),
        s.TagToggled("x"),
        s.SortChanged("title", "desc"),
        s.SortChanged("createdAt", "asc"),
    ],
)
def test_any_single_change_activates_filters(action):
    assert s.reduce(s.LinkListState(), action).has_active_filters is True


def test_toggle_tag_twice_deselects():
    state = s.reduce(s.LinkListState(), s.TagToggled("a"))
    state = s.reduce(state, s.TagToggled("b"))
    assert state.selected_tags == ("a", "b")
    state = s.reduce(state, s.TagToggled("a"))
    assert state.selected_tags == ("b",)
    assert s.reduce(state, s.TagsCleared()).selected_tags == ()


def test_only_first_selected_tag_is_sent():
    state = s.reduce(s.LinkListState(), s.TagToggled("first"))
    state = s.reduce(state, s.TagToggled("second"))
    params = state.query_params()
    assert params["tag"] == "first"


def test_query_params_include_search(filtered):
    assert filtered.query_params() == {
        "sortBy": "title",
        "sortOrder": "asc",
        "search": "react",
        "tag": "web",
    }


def test_reducer_does_not_mutate(filtered):
    before = filtered
    s.reduce(filtered, s.FiltersCleared())
    assert before.search == "react"


# --- Fetch sequencing ---


def test_fetch_success_derives_tags():
    state = s.reduce(s.LinkListState(), s.FetchStarted(1))
    assert state.is_loading is True
    links = (
        {"id": "1", "tags": ["b", "a"]},
        {"id": "2", "tags": ["a", "c"]},
        {"id": "3", "tags": []},
    )
    state = s.reduce(state, s.FetchSucceeded(1, links))
    assert state.is_loading is False
    assert state.links == links
    assert state.all_tags == ("a", "b", "c")


def test_stale_response_is_discarded():
    state = s.reduce(s.LinkListState(), s.FetchStarted(1))
    state = s.reduce(state, s.FetchStarted(2))
    fresh = ({"id": "new", "tags": []},)
    state = s.reduce(state, s.FetchSucceeded(2, fresh))

    stale = ({"id": "old", "tags": []},)
    after = s.reduce(state, s.FetchSucceeded(1, stale))

    assert after is state
    assert after.links == fresh


def test_stale_failure_is_discarded():
    state = s.reduce(s.LinkListState(), s.FetchStarted(1))
    state = s.reduce(state, s.FetchStarted(2))
    assert s.reduce(state, s.FetchFailed(1, "boom")) is state


def test_fetch_failure_sets_banner():
    state = s.reduce(s.LinkListState(), s.FetchStarted(1))
    state = s.reduce(state, s.FetchFailed(1, "Failed to fetch links"))
    assert state.error == "Failed to fetch links"
    assert state.is_loading is False
    # A new fetch clears the banner
    assert s.reduce(state, s.FetchStarted(2)).error is None


# --- Modals ---


def test_modal_transitions():
    state = s.LinkListState()
    state = s.reduce(state, s.AddModalOpened())
    assert state.add_modal_open is True
    state = s.reduce(state, s.ModalClosed())
    assert state.add_modal_open is False

    state = s.reduce(state, s.EditModalOpened("abc"))
    assert state.editing_link_id == "abc"
    state = s.reduce(state, s.AddModalOpened())
    assert state.editing_link_id is None
    assert state.add_modal_open is True


def test_editing_link_lookup():
    links = ({"id": "abc", "title": "T", "tags": []},)
    state = s.reduce(s.LinkListState(), s.FetchStarted(1))
    state = s.reduce(state, s.FetchSucceeded(1, links))
    state = s.reduce(state, s.EditModalOpened("abc"))
    assert state.editing_link == links[0]


def test_unknown_action_raises():
    with pytest.raises(TypeError):
        s.reduce(s.LinkListState(), object())


def test_only_filter_actions_trigger_refetch():
    for action in (s.SearchChanged("x"), s.TagToggled("x"), s.TagsCleared(),
                   s.SortChanged("title", "asc"), s.FiltersCleared()):
        assert isinstance(action, s.REFETCH_ACTIONS)
    for action in (s.FetchStarted(1), s.AddModalOpened(), s.ModalClosed(),
                   s.EditModalOpened("a"), s.MutationFailed("boom")):
        assert not isinstance(action, s.REFETCH_ACTIONS)
