from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint, UniqueConstraint

from app.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class CartLineModel(Base):
    __tablename__ = "cart_lines"
    __table_args__ = (
        UniqueConstraint("session_id", "product_id", name="u_cart_session_product"),
        CheckConstraint("quantity > 0", name="ck_cart_lines_quantity_positive"),
    )

    id = Column(Integer, primary_key=True)
    session_id = Column(String(100), nullable=False, index=True)
    # bez FK: usuniecie produktu nie kasuje linii, checkout zglosi ProductUnavailable
    product_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)
