"""Add/edit link form state and client-side validation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from linkvault.client.tag_input import TagInputState


def validate_new_link(url: str, title: str) -> str | None:
    """Return the error banner text for an invalid add form, else None."""
    if not url:
        return "URL is required"
    if not title:
        return "Title is required"
    return None


def validate_edit(title: str) -> str | None:
    if not title:
        return "Title is required"
    return None


@dataclass(frozen=True, slots=True)
class LinkForm:
    """Fields of the add or edit modal."""

    url: str = ""
    title: str = ""
    notes: str = ""
    tag_input: TagInputState = TagInputState()
    error: str | None = None

    @classmethod
    def for_link(cls, link: dict[str, Any]) -> LinkForm:
        """Edit form prefilled from an existing link object."""
        return cls(
            url=link.get("url") or "",
            title=link.get("title") or "",
            notes=link.get("notes") or "",
            tag_input=TagInputState(tags=tuple(link.get("tags") or ())),
        )

    def with_error(self, message: str | None) -> LinkForm:
        return replace(self, error=message)

    def create_payload(self) -> dict[str, Any]:
        # A pending, uncommitted tag is included like a blur would
        tags = self.tag_input.commit().tags
        return {"url": self.url, "title": self.title, "notes": self.notes, "tags": list(tags)}

    def update_payload(self) -> dict[str, Any]:
        tags = self.tag_input.commit().tags
        return {"title": self.title, "notes": self.notes, "tags": list(tags)}
