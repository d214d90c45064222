# app/repos/cart_repo.py
from sqlalchemy import select, delete

from app.data.models.cart_line import CartLineModel
from app.repos.base import BaseRepo


class CartRepo(BaseRepo):
    def get_line(self, line_id: int) -> CartLineModel | None:
        return self.db.execute(
            select(CartLineModel)
            .where(CartLineModel.id == line_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def get_line_for_product(self, session_id: str, product_id: int) -> CartLineModel | None:
        return self.db.execute(
            select(CartLineModel)
            .where(
                CartLineModel.session_id == session_id,
                CartLineModel.product_id == product_id,
            )
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def list_lines(self, session_id: str) -> list[CartLineModel]:
        return list(
            self.db.execute(
                select(CartLineModel)
                .where(CartLineModel.session_id == session_id)
                .order_by(CartLineModel.id)
                .execution_options(populate_existing=True)
            ).scalars()
        )

    def clear(self, session_id: str) -> int:
        result = self.db.execute(
            delete(CartLineModel)
            .where(CartLineModel.session_id == session_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
