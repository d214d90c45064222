# app/api/routers/reviews.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import http_error, lock_service
from app.data.database import get_db
from app.domain.errors import StoreError
from app.domain.schemas import ReviewIn, ReviewOut
from app.services.lock_service import BaseLockService
from app.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=ReviewOut, status_code=201)
def add_review(
    payload: ReviewIn,
    db: Session = Depends(get_db),
    locks: BaseLockService = Depends(lock_service),
):
    try:
        return ReviewService(db, lock_service=locks).add_review(payload)
    except StoreError as e:
        raise http_error(e)
