from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import Field, SQLModel


class Link(SQLModel, table=True):
    __tablename__ = "links"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    url: str
    title: str
    notes: str = Field(default="")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        sa_column_kwargs={"name": "createdAt"},
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column_kwargs={"name": "updatedAt"},
    )


# --- Pydantic schemas for request/response validation ---
# Wire format is camelCase (createdAt, sortBy, ...); Python side stays snake_case.

_camel_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LinkCreate(BaseModel):
    model_config = _camel_config

    # url and title are checked by the router so a missing one yields a 400
    # with a single message instead of a field-by-field validation report.
    url: str | None = None
    title: str | None = None
    notes: str | None = None
    tags: list[str] | None = None
    created_at: datetime | None = None


class LinkUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied."""

    model_config = _camel_config

    title: str | None = None
    notes: str | None = None
    tags: list[str] | None = None


class LinkRead(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    url: str
    title: str
    notes: str
    tags: list[str] = []
    created_at: datetime
    updated_at: datetime
