"""Tag model — labels shared across links."""
from __future__ import annotations

from pydantic import BaseModel
from sqlmodel import Field, SQLModel


class LinkTag(SQLModel, table=True):
    """Many-to-many junction table between links and tags."""
    __tablename__ = "link_tags"

    link_id: str = Field(foreign_key="links.id", primary_key=True, ondelete="CASCADE")
    tag_id: int = Field(foreign_key="tags.id", primary_key=True, ondelete="CASCADE")


class Tag(SQLModel, table=True):
    __tablename__ = "tags"

    id: int | None = Field(default=None, primary_key=True)
    # Stored exactly as sent; callers normalize (lowercase, trim) before saving
    name: str = Field(index=True, unique=True)


# --- Pydantic schemas ---

class TagCount(BaseModel):
    """A tag name with the number of links carrying it."""
    name: str
    count: int
