# app/repos/product_repo.py
from sqlalchemy import select, update, func, case, or_
from app.data.models.category import CategoryModel
from app.data.models.product import ProductModel
from app.data.models.review import ReviewModel
from app.repos.base import BaseRepo


class ProductRepo(BaseRepo):
    def get(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_active(self, product_id: int) -> ProductModel | None:
        product = self.get(product_id)
        if product is None or not product.is_active:
            return None
        return product

    def get_fresh(self, product_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .execution_options(populate_existing=True)
        ).unique().scalar_one_or_none()

    def get_for_update(self, product_id: int) -> ProductModel | None:
        # swiezy odczyt z bazy (populate_existing), FOR UPDATE tam gdzie dialekt wspiera
        return self.db.execute(
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .with_for_update(of=ProductModel)
            .execution_options(populate_existing=True)
        ).unique().scalar_one_or_none()

    def search(
        self,
        category: str | None,
        search: str | None,
        min_price,
        max_price,
        limit: int,
        offset: int,
    ) -> tuple[list[ProductModel], int]:
        unit_price = func.coalesce(ProductModel.sale_price, ProductModel.price)

        conditions = [ProductModel.is_active.is_(True)]
        if category:
            conditions.append(func.lower(CategoryModel.name) == category.lower())
        if min_price is not None:
            conditions.append(unit_price >= min_price)
        if max_price is not None:
            conditions.append(unit_price <= max_price)

        order_by = [ProductModel.created_at.desc(), ProductModel.id.desc()]
        if search:
            name_match = ProductModel.name.icontains(search, autoescape=True)
            description_match = ProductModel.description.icontains(search, autoescape=True)
            category_match = CategoryModel.name.icontains(search, autoescape=True)
            conditions.append(or_(name_match, description_match, category_match))
            # nazwa > opis > kategoria, potem alfabetycznie
            order_by = [
                case((name_match, 1), (description_match, 2), (category_match, 3), else_=4),
                ProductModel.name.asc(),
                ProductModel.id.asc(),
            ]

        base = (
            select(ProductModel.id)
            .outerjoin(CategoryModel, ProductModel.category_id == CategoryModel.id)
            .where(*conditions)
        )
        total = self.db.execute(select(func.count()).select_from(base.subquery())).scalar_one()

        page_ids = list(
            self.db.execute(base.order_by(*order_by).limit(limit).offset(offset)).scalars()
        )
        if not page_ids:
            return [], total

        products = {
            p.id: p
            for p in self.db.execute(
                select(ProductModel).where(ProductModel.id.in_(page_ids))
            ).unique().scalars()
        }
        return [products[pid] for pid in page_ids], total

    def featured(self, limit: int) -> list[ProductModel]:
        # remis ratingu -> kolejnosc wstawienia (id rosnaco)
        return list(
            self.db.execute(
                select(ProductModel)
                .where(ProductModel.is_active.is_(True))
                .order_by(ProductModel.rating.desc(), ProductModel.id.asc())
                .limit(limit)
            ).unique().scalars()
        )

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        """
        Warunkowy UPDATE: zmniejsza stan tylko jesli produkt jest aktywny
        i ma wystarczajaco sztuk. Zwraca rowcount (0 = konflikt).
        """
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.is_active.is_(True),
                ProductModel.stock >= quantity,
            )
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def increment_stock(self, product_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def review_aggregate(self, product_id: int) -> tuple[float | None, int]:
        avg, count = self.db.execute(
            select(func.avg(ReviewModel.rating), func.count(ReviewModel.id))
            .where(ReviewModel.product_id == product_id)
        ).one()
        return avg, count
