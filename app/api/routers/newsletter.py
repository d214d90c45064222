# app/api/routers/newsletter.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import http_error
from app.data.database import get_db
from app.domain.errors import StoreError
from app.domain.schemas import NewsletterIn, NewsletterOut
from app.services.newsletter_service import NewsletterService

router = APIRouter(prefix="/newsletter", tags=["newsletter"])


@router.post("", response_model=NewsletterOut, status_code=201)
def subscribe(payload: NewsletterIn, db: Session = Depends(get_db)):
    try:
        return NewsletterService(db).subscribe(payload.email)
    except StoreError as e:
        raise http_error(e)
