# app/repos/order_repo.py
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update, func

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.data.models.product import ProductModel
from app.repos.base import BaseRepo


class OrderRepo(BaseRepo):
    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_order_for_update(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def set_status(self, order_id: int, current: str, new: str, updated_at: datetime) -> int:
        """
        Warunkowy UPDATE statusu: tylko jesli zamowienie wciaz ma status current.
        Zwraca rowcount (0 = ktos zmienil status w miedzyczasie).
        """
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == current)
            .values(status=new, updated_at=updated_at)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount

    def list_by_customer(self, customer_id: int) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.customer_id == customer_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars()
        )

    def revenue_summary(self, exclude_status: str) -> tuple[int, Decimal]:
        count, revenue = self.db.execute(
            select(func.count(OrderModel.id), func.coalesce(func.sum(OrderModel.total), 0))
            .where(OrderModel.status != exclude_status)
        ).one()
        return count, Decimal(str(revenue))

    def top_selling_product_ids(self, exclude_status: str, limit: int) -> list[tuple[int, int]]:
        # tylko produkty wciaz aktywne, filtr przed LIMIT
        units = func.sum(OrderItemModel.quantity).label("units")
        rows = self.db.execute(
            select(OrderItemModel.product_id, units)
            .join(OrderModel, OrderItemModel.order_id == OrderModel.id)
            .join(ProductModel, OrderItemModel.product_id == ProductModel.id)
            .where(OrderModel.status != exclude_status, ProductModel.is_active.is_(True))
            .group_by(OrderItemModel.product_id)
            .order_by(units.desc(), OrderItemModel.product_id.asc())
            .limit(limit)
        ).all()
        return [(product_id, int(total)) for product_id, total in rows]
