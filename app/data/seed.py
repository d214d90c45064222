# app/data/seed.py
from decimal import Decimal

from sqlalchemy.orm import Session

from app.data.database import SessionLocal, init_db
from app.data.models import CategoryModel, CustomerModel, ProductModel, ReviewModel
from app.utils.logging import get_logger

logger = get_logger(__name__)

SAMPLE_PRODUCTS = [
    {
        "name": "Premium Wireless Headphones",
        "description": "Crystal-clear audio with active noise cancellation and 30-hour battery life.",
        "price": Decimal("299.99"),
        "category": "Electronics",
        "stock": 25,
    },
    {
        "name": "Smart Fitness Watch",
        "description": "Heart rate monitoring, GPS and sleep tracking on your wrist.",
        "price": Decimal("199.99"),
        "category": "Wearables",
        "stock": 18,
    },
    {
        "name": "Ergonomic Office Chair",
        "description": "Lumbar support, adjustable height and breathable mesh back.",
        "price": Decimal("449.99"),
        "sale_price": Decimal("399.99"),
        "category": "Furniture",
        "stock": 12,
    },
]


def seed(db: Session | None = None) -> bool:
    """Wypelnia pusta baze przykladowym katalogiem. Zwraca False gdy baza nie byla pusta."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return False

        categories = {}
        for data in SAMPLE_PRODUCTS:
            name = data["category"]
            if name not in categories:
                categories[name] = CategoryModel(name=name)
                db.add(categories[name])

        products = []
        for data in SAMPLE_PRODUCTS:
            fields = {k: v for k, v in data.items() if k != "category"}
            product = ProductModel(category=categories[data["category"]], **fields)
            db.add(product)
            products.append(product)

        customer = CustomerModel(
            name="John Smith",
            email="john.smith@example.com",
            phone="+1-555-0123",
            address={
                "street": "123 Main Street",
                "city": "New York",
                "state": "NY",
                "zip_code": "10001",
                "country": "USA",
            },
        )
        db.add(customer)
        db.flush()

        for product, rating, title in (
            (products[0], 5, "Amazing sound quality!"),
            (products[1], 4, "Great fitness companion"),
        ):
            db.add(
                ReviewModel(
                    product_id=product.id,
                    customer_id=customer.id,
                    rating=rating,
                    title=title,
                    is_verified=True,
                )
            )
            product.rating = Decimal(rating)
            product.review_count = 1

        db.commit()
        logger.info(f"Seeded {len(products)} products in {len(categories)} categories")
        return True
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    init_db()
    seed()
