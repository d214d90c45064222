# app/services/newsletter_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.newsletter import NewsletterSubscriberModel
from app.domain.errors import Conflict
from app.repos.newsletter_repo import NewsletterRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NewsletterService:
    def __init__(self, db: Session):
        self.repo = NewsletterRepo(db)

    def subscribe(self, email: str) -> NewsletterSubscriberModel:
        """Format adresu sprawdza juz NewsletterIn (EmailStr), tu tylko normalizacja i duplikaty."""
        email = email.strip().lower()

        if self.repo.get_by_email(email):
            raise Conflict(f"Email {email} is already subscribed")

        try:
            subscriber = self.repo.add(NewsletterSubscriberModel(email=email))
            self.repo.commit()
        except IntegrityError:
            # rownolegly zapis tego samego adresu
            self.repo.rollback()
            raise Conflict(f"Email {email} is already subscribed")

        logger.info(f"Newsletter subscriber {subscriber.id} added")
        return subscriber
