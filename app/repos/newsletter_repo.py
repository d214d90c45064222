# app/repos/newsletter_repo.py
from sqlalchemy import select, func

from app.data.models.newsletter import NewsletterSubscriberModel
from app.repos.base import BaseRepo


class NewsletterRepo(BaseRepo):
    def get_by_email(self, email: str) -> NewsletterSubscriberModel | None:
        return self.db.execute(
            select(NewsletterSubscriberModel)
            .where(func.lower(NewsletterSubscriberModel.email) == email.lower())
        ).scalar_one_or_none()
