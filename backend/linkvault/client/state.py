"""Link list state for LinkVault clients.

The whole list/filter/sort/modal state is one immutable ``LinkListState``.
It only changes through ``reduce(state, action)``, which returns a new state
and never performs I/O. UI code renders from the state and dispatches actions;
``LinkVaultController`` does the HTTP work and feeds results back as actions.

Fetches are sequenced: every ``FetchStarted`` carries a token that becomes
``latest_request``. A ``FetchSucceeded``/``FetchFailed`` with any other token
is a superseded response and is ignored, so a slow earlier request can never
overwrite the results of a later one.

Only the first selected tag is sent as a filter. Selecting more tags keeps
them visible in the UI but does not narrow the list further.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"


@dataclass(frozen=True, slots=True)
class LinkListState:
    links: tuple[dict[str, Any], ...] = ()
    all_tags: tuple[str, ...] = ()
    search: str = ""
    selected_tags: tuple[str, ...] = ()
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER
    is_loading: bool = True
    error: str | None = None
    add_modal_open: bool = False
    editing_link_id: str | None = None
    latest_request: int = 0

    @property
    def has_active_filters(self) -> bool:
        """False exactly when search, tags and sort are all at their defaults."""
        return (
            self.search != ""
            or len(self.selected_tags) > 0
            or self.sort_by != DEFAULT_SORT_BY
            or self.sort_order != DEFAULT_SORT_ORDER
        )

    @property
    def editing_link(self) -> dict[str, Any] | None:
        if self.editing_link_id is None:
            return None
        for link in self.links:
            if link.get("id") == self.editing_link_id:
                return link
        return None

    def query_params(self) -> dict[str, str]:
        """Query parameters for ``GET /links`` reflecting the current filters."""
        params = {"sortBy": self.sort_by, "sortOrder": self.sort_order}
        if self.search:
            params["search"] = self.search
        if self.selected_tags:
            params["tag"] = self.selected_tags[0]
        return params


# --- Actions ---


@dataclass(frozen=True, slots=True)
class SearchChanged:
    search: str


@dataclass(frozen=True, slots=True)
class TagToggled:
    tag: str


@dataclass(frozen=True, slots=True)
class TagsCleared:
    pass


@dataclass(frozen=True, slots=True)
class SortChanged:
    sort_by: str
    sort_order: str


@dataclass(frozen=True, slots=True)
class FiltersCleared:
    pass


@dataclass(frozen=True, slots=True)
class FetchStarted:
    token: int


@dataclass(frozen=True, slots=True)
class FetchSucceeded:
    token: int
    links: tuple[dict[str, Any], ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class FetchFailed:
    token: int
    message: str


@dataclass(frozen=True, slots=True)
class AddModalOpened:
    pass


@dataclass(frozen=True, slots=True)
class EditModalOpened:
    link_id: str


@dataclass(frozen=True, slots=True)
class ModalClosed:
    pass


@dataclass(frozen=True, slots=True)
class MutationFailed:
    message: str


# Actions after which the list must be fetched again
REFETCH_ACTIONS = (SearchChanged, TagToggled, TagsCleared, SortChanged, FiltersCleared)


def collect_tags(links) -> tuple[str, ...]:
    """Sorted unique tag names across the given link objects."""
    seen: set[str] = set()
    for link in links:
        seen.update(link.get("tags") or ())
    return tuple(sorted(seen))


def reduce(state: LinkListState, action) -> LinkListState:
    """Return the state that results from applying ``action`` to ``state``."""
    if isinstance(action, SearchChanged):
        return replace(state, search=action.search)

    if isinstance(action, TagToggled):
        if action.tag in state.selected_tags:
            selected = tuple(t for t in state.selected_tags if t != action.tag)
        else:
            selected = (*state.selected_tags, action.tag)
        return replace(state, selected_tags=selected)

    if isinstance(action, TagsCleared):
        return replace(state, selected_tags=())

    if isinstance(action, SortChanged):
        return replace(state, sort_by=action.sort_by, sort_order=action.sort_order)

    if isinstance(action, FiltersCleared):
        return replace(
            state,
            search="",
            selected_tags=(),
            sort_by=DEFAULT_SORT_BY,
            sort_order=DEFAULT_SORT_ORDER,
        )

    if isinstance(action, FetchStarted):
        return replace(
            state, is_loading=True, error=None, latest_request=action.token
        )

    if isinstance(action, FetchSucceeded):
        if action.token != state.latest_request:
            return state
        links = tuple(action.links)
        return replace(
            state,
            links=links,
            all_tags=collect_tags(links),
            is_loading=False,
            error=None,
        )

    if isinstance(action, FetchFailed):
        if action.token != state.latest_request:
            return state
        return replace(state, is_loading=False, error=action.message)

    if isinstance(action, AddModalOpened):
        return replace(state, add_modal_open=True, editing_link_id=None)

    if isinstance(action, EditModalOpened):
        return replace(state, add_modal_open=False, editing_link_id=action.link_id)

    if isinstance(action, ModalClosed):
        return replace(state, add_modal_open=False, editing_link_id=None)

    if isinstance(action, MutationFailed):
        return replace(state, error=action.message)

    raise TypeError(f"Unknown action: {action!r}")
