"""Glue between ``LinkListState`` and the REST API.

The controller owns the current state and a ``LinkVaultClient``. UI code
calls its methods and re-renders from ``controller.state``; every filter or
sort change refetches the list, and mutations refetch after they succeed.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable

from linkvault.client import state as s
from linkvault.client.api import ApiError, LinkVaultClient
from linkvault.client.forms import LinkForm, validate_edit, validate_new_link

logger = logging.getLogger(__name__)


class LinkVaultController:
    def __init__(
        self,
        client: LinkVaultClient,
        on_change: Callable[[s.LinkListState], None] | None = None,
    ) -> None:
        self._client = client
        self._on_change = on_change
        self._tokens = itertools.count(1)
        self.state = s.LinkListState()

    def dispatch(self, action) -> s.LinkListState:
        new_state = s.reduce(self.state, action)
        if new_state is not self.state:
            self.state = new_state
            if self._on_change is not None:
                self._on_change(new_state)
        return self.state

    # --- Listing ---

    async def refresh(self) -> None:
        token = next(self._tokens)
        self.dispatch(s.FetchStarted(token))
        params = self.state.query_params()
        try:
            links = await self._client.list_links(params)
        except ApiError as exc:
            self.dispatch(s.FetchFailed(token, exc.message))
            return
        self.dispatch(s.FetchSucceeded(token, tuple(links)))

    async def set_search(self, search: str) -> None:
        await self._filter(s.SearchChanged(search))

    async def toggle_tag(self, tag: str) -> None:
        await self._filter(s.TagToggled(tag))

    async def clear_tags(self) -> None:
        await self._filter(s.TagsCleared())

    async def set_sort(self, sort_by: str, sort_order: str) -> None:
        await self._filter(s.SortChanged(sort_by, sort_order))

    async def clear_filters(self) -> None:
        if not self.state.has_active_filters:
            return
        await self._filter(s.FiltersCleared())

    async def _filter(self, action) -> None:
        before = self.state
        self.dispatch(action)
        if isinstance(action, s.REFETCH_ACTIONS) and self.state != before:
            await self.refresh()

    # --- Modals ---

    def open_add(self) -> LinkForm:
        self.dispatch(s.AddModalOpened())
        return LinkForm()

    def open_edit(self, link_id: str) -> LinkForm:
        self.dispatch(s.EditModalOpened(link_id))
        link = self.state.editing_link
        return LinkForm.for_link(link) if link is not None else LinkForm()

    def close_modal(self) -> None:
        self.dispatch(s.ModalClosed())

    # --- Mutations ---

    async def submit_add(self, form: LinkForm) -> LinkForm:
        """Create a link from the add form.

        Returns the form with an error set when validation or the request
        fails; the modal stays open in that case.
        """
        problem = validate_new_link(form.url, form.title)
        if problem:
            return form.with_error(problem)
        try:
            await self._client.create_link(form.create_payload())
        except ApiError as exc:
            return form.with_error(exc.message)
        self.close_modal()
        await self.refresh()
        return form.with_error(None)

    async def submit_edit(self, link_id: str, form: LinkForm) -> LinkForm:
        problem = validate_edit(form.title)
        if problem:
            return form.with_error(problem)
        try:
            await self._client.update_link(link_id, form.update_payload())
        except ApiError as exc:
            return form.with_error(exc.message)
        self.close_modal()
        await self.refresh()
        return form.with_error(None)

    async def delete(self, link_id: str) -> None:
        try:
            await self._client.delete_link(link_id)
        except ApiError as exc:
            logger.info("Delete of %s failed: %s", link_id, exc.message)
            self.dispatch(s.MutationFailed(exc.message))
            return
        await self.refresh()

