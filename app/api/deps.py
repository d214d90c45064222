# app/api/deps.py
from fastapi import HTTPException

from app.domain.errors import StoreError
from app.services.lock_service import BaseLockService, get_lock_service
from app.utils.logging import get_logger

logger = get_logger(__name__)


def lock_service() -> BaseLockService:
    return get_lock_service()


def http_error(e: StoreError) -> HTTPException:
    """Tlumaczy blad domeny na HTTPException z kodem z taksonomii."""
    if e.status_code >= 500:
        logger.error(f"Internal fault: {e.message}")
        return HTTPException(status_code=e.status_code, detail={"code": e.code, "message": "Internal error"})
    return HTTPException(status_code=e.status_code, detail=e.to_detail())
