"""Link persistence — links, tags and the link_tags junction.

All reads and writes for the three relations go through ``LinkStore``.
Each mutating operation runs in a single transaction: on any database
failure the session is rolled back and ``StorageError`` is raised, so a
request never leaves a half-written link or a partial tag set behind.

Tags are resolved by exact name. A brand-new name is inserted inside a
SAVEPOINT; if a concurrent request inserted the same name first, the unique
constraint rejects ours and the existing row is reused.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import delete, func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from linkvault.models.link import Link, LinkRead, LinkUpdate
from linkvault.models.tag import LinkTag, Tag, TagCount

logger = logging.getLogger(__name__)

# API sort names -> columns. Anything else falls back to createdAt.
SORTABLE_COLUMNS = {
    "id": Link.id,
    "url": Link.url,
    "title": Link.title,
    "notes": Link.notes,
    "createdAt": Link.created_at,
    "updatedAt": Link.updated_at,
}
DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"


class LinkNotFoundError(Exception):
    """Raised when no link exists with the requested id."""

    def __init__(self, link_id: str) -> None:
        super().__init__(f"Link not found: {link_id}")
        self.link_id = link_id


class StorageError(Exception):
    """Raised when the underlying database operation fails."""


@dataclass(frozen=True, slots=True)
class LinkFilter:
    """Listing parameters for ``LinkStore.get_links``."""

    tag: str | None = None
    search: str | None = None
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = DEFAULT_SORT_ORDER
    limit: int = 20
    offset: int = 0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _unique(names: Iterable[str]) -> list[str]:
    # Exact-string dedup only, first occurrence wins
    return list(dict.fromkeys(names))


class LinkStore:
    """CRUD and filtered listing over links and their tags."""

    __slots__ = ("_session",)

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- Writes ---

    def create_link(
        self,
        url: str,
        title: str,
        notes: str | None = None,
        tags: Iterable[str] = (),
        created_at: datetime | None = None,
    ) -> LinkRead:
        now = _utcnow()
        if created_at is not None and created_at.tzinfo is not None:
            created_at = created_at.astimezone(timezone.utc)
        link = Link(
            url=url,
            title=title,
            notes=notes or "",
            created_at=created_at or now,
            updated_at=now,
        )
        with self._transaction("create link"):
            self._session.add(link)
            self._session.flush()
            self._add_tags(link.id, tags)
            self._session.commit()
            self._session.refresh(link)
            created = self._read_one(link)

        logger.info("Created link %s (%s)", created.id, created.url)
        return created

    def update_link(self, link_id: str, changes: LinkUpdate) -> LinkRead:
        supplied = changes.model_fields_set
        with self._transaction("update link"):
            link = self._session.get(Link, link_id)
            if link is None:
                raise LinkNotFoundError(link_id)

            if "title" in supplied and changes.title is not None:
                link.title = changes.title
            if "notes" in supplied:
                link.notes = changes.notes or ""
            link.updated_at = _utcnow()
            self._session.add(link)
            self._session.flush()

            if "tags" in supplied and changes.tags is not None:
                # Full replacement, not a diff
                self._session.execute(
                    delete(LinkTag).where(LinkTag.link_id == link_id)  # type: ignore[arg-type]
                )
                self._add_tags(link_id, changes.tags)

            self._session.commit()
            self._session.refresh(link)
            return self._read_one(link)

    def delete_link(self, link_id: str) -> None:
        with self._transaction("delete link"):
            self._session.execute(
                delete(LinkTag).where(LinkTag.link_id == link_id)  # type: ignore[arg-type]
            )
            result = self._session.execute(
                delete(Link).where(Link.id == link_id)  # type: ignore[arg-type]
            )
            if result.rowcount == 0:
                self._session.rollback()
                raise LinkNotFoundError(link_id)
            self._session.commit()

        logger.info("Deleted link %s", link_id)

    # --- Reads ---

    def get_link(self, link_id: str) -> LinkRead:
        with self._transaction("get link"):
            link = self._session.get(Link, link_id)
            if link is None:
                raise LinkNotFoundError(link_id)
            return self._read_one(link)

    def get_links(self, link_filter: LinkFilter) -> list[LinkRead]:
        statement = select(Link)

        if link_filter.tag:
            statement = (
                statement.join(LinkTag, LinkTag.link_id == Link.id)  # type: ignore[arg-type]
                .join(Tag, LinkTag.tag_id == Tag.id)  # type: ignore[arg-type]
                .where(Tag.name == link_filter.tag)
            )

        if link_filter.search:
            term = link_filter.search
            statement = statement.where(
                or_(
                    Link.title.icontains(term, autoescape=True),  # type: ignore[attr-defined]
                    Link.notes.icontains(term, autoescape=True),  # type: ignore[attr-defined]
                    Link.url.icontains(term, autoescape=True),  # type: ignore[attr-defined]
                )
            )

        column = SORTABLE_COLUMNS.get(link_filter.sort_by)
        if column is None:
            logger.debug(
                "Unknown sort column %r, using %s", link_filter.sort_by, DEFAULT_SORT_BY
            )
            column = SORTABLE_COLUMNS[DEFAULT_SORT_BY]
        ordering = column.asc() if link_filter.sort_order == "asc" else column.desc()  # type: ignore[union-attr]

        statement = (
            statement.order_by(ordering, Link.id)  # type: ignore[arg-type]
            .offset(link_filter.offset)
            .limit(link_filter.limit)
        )

        with self._transaction("list links"):
            links = list(self._session.exec(statement).all())
            logger.debug("Listing %d link(s) for %s", len(links), link_filter)
            return self._read_many(links)

    def list_tags(self) -> list[TagCount]:
        statement = (
            select(Tag.name, func.count(LinkTag.link_id))  # type: ignore[arg-type]
            .outerjoin(LinkTag, LinkTag.tag_id == Tag.id)  # type: ignore[arg-type]
            .group_by(Tag.id, Tag.name)
            .order_by(Tag.name)
        )
        with self._transaction("list tags"):
            rows = self._session.exec(statement).all()
        return [TagCount(name=name, count=count) for name, count in rows]

    # --- Internals ---

    @contextmanager
    def _transaction(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.exception("Storage failure during %s", action)
            raise StorageError(f"Failed to {action}: {exc}") from exc

    def _find_tag(self, name: str) -> Tag | None:
        return self._session.exec(select(Tag).where(Tag.name == name)).first()

    def _resolve_tag(self, name: str) -> Tag:
        tag = self._find_tag(name)
        if tag is not None:
            return tag
        try:
            with self._session.begin_nested():
                tag = Tag(name=name)
                self._session.add(tag)
        except IntegrityError:
            logger.warning("Tag %r was created concurrently, reusing it", name)
            tag = self._find_tag(name)
            if tag is None:
                raise
        return tag

    def _add_tags(self, link_id: str, names: Iterable[str]) -> None:
        for name in _unique(names):
            tag = self._resolve_tag(name)
            self._session.add(LinkTag(link_id=link_id, tag_id=tag.id))
        self._session.flush()

    def _tags_by_link(self, link_ids: list[str]) -> dict[str, list[str]]:
        if not link_ids:
            return {}
        rows = self._session.exec(
            select(LinkTag.link_id, Tag.name)
            .join(Tag, LinkTag.tag_id == Tag.id)  # type: ignore[arg-type]
            .where(LinkTag.link_id.in_(link_ids))  # type: ignore[attr-defined]
            .order_by(Tag.name)
        ).all()
        tags: dict[str, list[str]] = {}
        for link_id, name in rows:
            tags.setdefault(link_id, []).append(name)
        return tags

    def _read_many(self, links: list[Link]) -> list[LinkRead]:
        tags = self._tags_by_link([link.id for link in links])
        result = []
        for link in links:
            read = LinkRead.model_validate(link)
            read.tags = tags.get(link.id, [])
            result.append(read)
        return result

    def _read_one(self, link: Link) -> LinkRead:
        return self._read_many([link])[0]
