from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    image_url = Column(String(500), nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    sale_price = Column(Numeric(10, 2), nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    # pola wyliczane z recenzji, nie edytowane recznie
    rating = Column(Numeric(2, 1), nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    category = relationship("CategoryModel", back_populates="products", lazy="joined")
    reviews = relationship(
        "ReviewModel",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ReviewModel.created_at.desc()",
    )

    @property
    def unit_price(self):
        return self.sale_price if self.sale_price is not None else self.price

    @property
    def category_name(self):
        return self.category.name if self.category else None
