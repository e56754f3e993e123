from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from linkvault.config import get_settings
from linkvault.dependencies import get_link_store
from linkvault.models.link import LinkCreate, LinkRead, LinkUpdate
from linkvault.services.links import (
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    LinkFilter,
    LinkNotFoundError,
    LinkStore,
    StorageError,
)

router = APIRouter(prefix="/links", tags=["links"])

_settings = get_settings()


@router.get("", response_model=list[LinkRead])
async def list_links(
    tag: str | None = Query(None, description="Only links carrying this exact tag name"),
    search: str | None = Query(None, description="Case-insensitive substring of title, notes or URL"),
    limit: int = Query(_settings.default_page_size, ge=0),
    offset: int = Query(0, ge=0),
    sort_by: str = Query(DEFAULT_SORT_BY, alias="sortBy"),
    sort_order: str = Query(DEFAULT_SORT_ORDER, alias="sortOrder"),
    store: LinkStore = Depends(get_link_store),
) -> list[LinkRead]:
    link_filter = LinkFilter(
        tag=tag,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        # Oversized pages are clamped rather than rejected
        limit=min(limit, _settings.max_page_size),
        offset=offset,
    )
    try:
        return store.get_links(link_filter)
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.get("/{link_id}", response_model=LinkRead)
async def get_link(
    link_id: str,
    store: LinkStore = Depends(get_link_store),
) -> LinkRead:
    try:
        return store.get_link(link_id)
    except LinkNotFoundError:
        raise HTTPException(status_code=404, detail="Link not found")
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.post("", response_model=LinkRead, status_code=201)
async def create_link(
    body: LinkCreate,
    store: LinkStore = Depends(get_link_store),
) -> LinkRead:
    if not body.url or not body.title:
        raise HTTPException(status_code=400, detail="URL and title are required")

    try:
        return store.create_link(
            url=body.url,
            title=body.title,
            notes=body.notes,
            tags=body.tags or (),
            created_at=body.created_at,
        )
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.patch("/{link_id}", response_model=LinkRead)
async def update_link(
    link_id: str,
    body: LinkUpdate,
    store: LinkStore = Depends(get_link_store),
) -> LinkRead:
    if "title" in body.model_fields_set and not body.title:
        raise HTTPException(status_code=400, detail="Title cannot be empty")

    try:
        return store.update_link(link_id, body)
    except LinkNotFoundError:
        raise HTTPException(status_code=404, detail="Link not found")
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.delete("/{link_id}", status_code=204)
async def delete_link(
    link_id: str,
    store: LinkStore = Depends(get_link_store),
) -> Response:
    try:
        store.delete_link(link_id)
    except LinkNotFoundError:
        raise HTTPException(status_code=404, detail="Link not found")
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return Response(status_code=204)
