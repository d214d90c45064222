from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from app.data.database import Base


class NewsletterSubscriberModel(Base):
    __tablename__ = "newsletter_subscribers"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)
    subscribed_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
