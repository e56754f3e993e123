"""Tag entry for the add/edit link forms.

One text box accepts several comma-separated tags. Committing it (Enter,
Tab, blur or the Add button) normalizes each token to trimmed lowercase,
drops empty tokens and tokens already chosen, appends the rest and clears
the box. Backspace on an empty box removes the most recently added tag.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

COMMIT_KEYS = frozenset({"Enter", "Tab"})


def parse_tags(text: str) -> list[str]:
    """Split ``text`` on commas into normalized, unique, non-empty tags."""
    tags: list[str] = []
    for token in text.split(","):
        tag = token.strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


@dataclass(frozen=True, slots=True)
class TagInputState:
    tags: tuple[str, ...] = ()
    current: str = ""

    def typed(self, text: str) -> TagInputState:
        return replace(self, current=text)

    def commit(self) -> TagInputState:
        if not self.current.strip():
            return replace(self, current="")
        new = [t for t in parse_tags(self.current) if t not in self.tags]
        return TagInputState(tags=(*self.tags, *new), current="")

    def key_down(self, key: str) -> TagInputState:
        if key in COMMIT_KEYS:
            return self.commit()
        if key == "Backspace" and self.current == "" and self.tags:
            return replace(self, tags=self.tags[:-1])
        return self

    def blur(self) -> TagInputState:
        return self.commit()

    def add(self, tag: str) -> TagInputState:
        # Suggestion clicks add the existing tag verbatim
        if tag in self.tags:
            return self
        return replace(self, tags=(*self.tags, tag))

    def remove(self, tag: str) -> TagInputState:
        return replace(self, tags=tuple(t for t in self.tags if t != tag))

    def suggestions(self, existing: Iterable[str]) -> list[str]:
        """Existing tags not yet chosen that contain the text being typed."""
        needle = self.current.lower()
        return [
            tag
            for tag in existing
            if tag not in self.tags and (not needle or needle in tag.lower())
        ]
