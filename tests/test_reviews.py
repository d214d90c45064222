import threading
from decimal import Decimal

import pytest

from app.data.database import SessionLocal
from app.data.models import ProductModel, ReviewModel
from app.domain.errors import Conflict, NotFound, ValidationError
from app.domain.schemas import ReviewIn
from app.services.lock_service import LocalLockService, product_lock_key
from app.services.review_service import ReviewService


def review_in(product_id, customer_id, rating, title="Nice"):
    return ReviewIn(product_id=product_id, customer_id=customer_id, rating=rating, title=title)


@pytest.fixture()
def reviews(db, locks):
    return ReviewService(db, locks)


class TestAddReview:
    def test_rating_is_recomputed_half_up(self, db, reviews, make_product, make_customer):
        product = make_product()
        customer = make_customer()

        for rating in (5, 4, 4, 4):
            reviews.add_review(review_in(product.id, customer.id, rating))

        db.refresh(product)
        assert product.rating == Decimal("4.3")
        assert product.review_count == 4

    def test_single_review(self, db, reviews, make_product, make_customer):
        product = make_product()
        customer = make_customer()

        review = reviews.add_review(review_in(product.id, customer.id, 2, title="Meh"))

        db.refresh(product)
        assert review.id is not None
        assert review.is_verified is False
        assert product.rating == Decimal("2.0")
        assert product.review_count == 1

    def test_same_customer_can_review_twice(self, db, reviews, make_product, make_customer):
        product = make_product()
        customer = make_customer()

        reviews.add_review(review_in(product.id, customer.id, 5))
        reviews.add_review(review_in(product.id, customer.id, 1))

        db.refresh(product)
        assert product.review_count == 2
        assert product.rating == Decimal("3.0")
        assert len(reviews.list_reviews(product.id)) == 2

    def test_out_of_range_rating(self, reviews, make_product, make_customer):
        product = make_product()
        customer = make_customer()
        payload = ReviewIn.model_construct(
            product_id=product.id, customer_id=customer.id, rating=6, title="Too good", comment=""
        )

        with pytest.raises(ValidationError) as exc:
            reviews.add_review(payload)
        assert "rating" in exc.value.fields

    def test_missing_product(self, reviews, make_customer):
        customer = make_customer()
        with pytest.raises(NotFound):
            reviews.add_review(review_in(999, customer.id, 5))

    def test_inactive_product(self, reviews, make_product, make_customer):
        product = make_product(is_active=False)
        customer = make_customer()
        with pytest.raises(NotFound):
            reviews.add_review(review_in(product.id, customer.id, 5))

    def test_missing_customer(self, db, reviews, make_product):
        product = make_product()
        with pytest.raises(NotFound):
            reviews.add_review(review_in(product.id, 999, 5))

        db.refresh(product)
        assert product.review_count == 0


    def test_waits_for_product_lock(self, db, make_product, make_customer):
        product = make_product()
        customer = make_customer()
        quick = LocalLockService(timeout=0.1)
        quick.acquire(product_lock_key(product.id), "checkout")

        with pytest.raises(Conflict):
            ReviewService(db, quick).add_review(review_in(product.id, customer.id, 5))

        assert db.query(ReviewModel).count() == 0

    def test_concurrent_reviews_keep_aggregate_in_sync(self, locks, make_product, make_customer):
        product = make_product()
        customer = make_customer()
        barrier = threading.Barrier(4)
        errors = []

        def worker(rating):
            session = SessionLocal()
            try:
                barrier.wait()
                ReviewService(session, locks).add_review(review_in(product.id, customer.id, rating))
            except Exception as e:
                errors.append(e)
            finally:
                session.close()

        threads = [threading.Thread(target=worker, args=(r,)) for r in (5, 4, 4, 4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        check = SessionLocal()
        fresh = check.get(ProductModel, product.id)
        assert errors == []
        assert fresh.review_count == 4
        assert fresh.rating == Decimal("4.3")
        check.close()


class TestListReviews:
    def test_newest_first(self, reviews, make_product, make_customer):
        product = make_product()
        customer = make_customer()
        first = reviews.add_review(review_in(product.id, customer.id, 5, title="First"))
        second = reviews.add_review(review_in(product.id, customer.id, 4, title="Second"))

        listed = reviews.list_reviews(product.id)

        assert [r.id for r in listed] == [second.id, first.id]

    def test_unknown_product(self, reviews):
        with pytest.raises(NotFound):
            reviews.list_reviews(404)
