from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, JSON
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from app.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    session_id = Column(String(100), nullable=True)

    status = Column(String(20), nullable=False, default="pending")  # pending, processing, shipped, delivered, cancelled
    total = Column(Numeric(10, 2), nullable=False)

    # kopie wartosci, nie referencje do adresu klienta
    shipping_address = Column(JSON, nullable=False)
    billing_address = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
    customer = relationship("CustomerModel")
