"""FastAPI dependency injection for the link store."""

from __future__ import annotations

from fastapi import Depends
from sqlmodel import Session

from linkvault.db import get_session
from linkvault.services.links import LinkStore


def get_link_store(session: Session = Depends(get_session)) -> LinkStore:
    """Inject a LinkStore bound to the request's database session."""
    return LinkStore(session)
