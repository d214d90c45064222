# app/services/review_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from app.data.models.review import ReviewModel
from app.domain.errors import NotFound, ValidationError
from app.domain.money import round_rating, to_decimal
from app.domain.schemas import ReviewIn
from app.repos.customer_repo import CustomerRepo
from app.repos.product_repo import ProductRepo
from app.repos.review_repo import ReviewRepo
from app.services.lock_service import BaseLockService, get_lock_service, product_lock_key
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ReviewService:
    """
    Recenzje produktow. Po kazdej nowej recenzji rating (srednia, 1 miejsce
    po przecinku, half-up) i review_count produktu sa wyliczane od nowa
    w tej samej transakcji co insert.

    Zapis idzie pod lockiem produktu i z odczytem FOR UPDATE, wiec dwie
    rownolegle recenzje nie nadpisza sobie agregatu starsza srednia.

    Ten sam klient moze wystawic kilka recenzji jednego produktu - to
    zachowanie zamierzone, duplikaty nie sa odrzucane ani scalane.
    """

    def __init__(self, db: Session, lock_service: BaseLockService | None = None):
        self.repo = ReviewRepo(db)
        self.products = ProductRepo(db)
        self.customers = CustomerRepo(db)
        self.lock_service = lock_service or get_lock_service()

    def add_review(self, payload: ReviewIn) -> ReviewModel:
        if not 1 <= payload.rating <= 5:
            raise ValidationError("Rating must be between 1 and 5", fields={"rating": "must be in 1..5"})

        if not self.customers.get(payload.customer_id):
            raise NotFound("Customer", payload.customer_id)

        with self.lock_service.hold([product_lock_key(payload.product_id)]):
            try:
                product = self.products.get_for_update(payload.product_id)
                if not product or not product.is_active:
                    raise NotFound("Product", payload.product_id)

                review = self.repo.add(
                    ReviewModel(
                        product_id=payload.product_id,
                        customer_id=payload.customer_id,
                        rating=payload.rating,
                        title=payload.title,
                        comment=payload.comment,
                    )
                )

                average, count = self.products.review_aggregate(product.id)
                product.rating = round_rating(to_decimal(average)) if count else Decimal("0.0")
                product.review_count = count

                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

        logger.info(
            f"Review {review.id} added to product {product.id}: "
            f"rating {product.rating} from {product.review_count} review(s)"
        )
        return review

    def list_reviews(self, product_id: int) -> list[ReviewModel]:
        if not self.products.get_active(product_id):
            raise NotFound("Product", product_id)
        return self.repo.list_for_product(product_id)
