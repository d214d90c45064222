# app/api/routers/stats.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import lock_service
from app.data.database import get_db
from app.domain.schemas import StatsOut
from app.services.lock_service import BaseLockService
from app.services.order_service import OrderService

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=StatsOut)
def get_stats(
    db: Session = Depends(get_db),
    locks: BaseLockService = Depends(lock_service),
):
    return OrderService(db, lock_service=locks).stats()
