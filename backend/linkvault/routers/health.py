from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlmodel import Session, text

from linkvault.db import get_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(session: Session = Depends(get_session)):
    db_status = "ok"
    try:
        session.exec(text("SELECT 1"))
    except Exception as exc:
        logger.warning("Health check could not reach the database", exc_info=True)
        db_status = f"error: {exc}"

    return {
        "status": "ok",
        "message": "Service is running",
        "checks": {"database": db_status},
    }
