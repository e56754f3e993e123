"""Tag router — read-only view of the tag vocabulary."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from linkvault.dependencies import get_link_store
from linkvault.models.tag import TagCount
from linkvault.services.links import LinkStore, StorageError

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=list[TagCount])
async def list_tags(store: LinkStore = Depends(get_link_store)) -> list[TagCount]:
    """Every known tag with the number of links carrying it, ordered by name."""
    try:
        return store.list_tags()
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
