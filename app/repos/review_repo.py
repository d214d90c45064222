# app/repos/review_repo.py
from sqlalchemy import select

from app.data.models.review import ReviewModel
from app.repos.base import BaseRepo


class ReviewRepo(BaseRepo):
    def list_for_product(self, product_id: int) -> list[ReviewModel]:
        return list(
            self.db.execute(
                select(ReviewModel)
                .where(ReviewModel.product_id == product_id)
                .order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
            ).scalars()
        )
