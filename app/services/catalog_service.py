# app/services/catalog_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from app.data.models.category import CategoryModel
from app.data.models.product import ProductModel
from app.domain.errors import Conflict, NotFound, ValidationError
from app.domain.schemas import CategoryIn, ProductIn, ProductUpdate
from app.repos.category_repo import CategoryRepo
from app.repos.product_repo import ProductRepo
from app.utils.settings import DEFAULT_PAGE_SIZE, FEATURED_LIMIT, MAX_PAGE_SIZE
from app.utils.logging import get_logger

logger = get_logger(__name__)


def clamp_pagination(limit: int | None, offset: int | None) -> tuple[int, int]:
    """Zle wartosci stronicowania sa poprawiane, nie odrzucane."""
    if limit is None or limit < 1:
        limit = DEFAULT_PAGE_SIZE
    limit = min(limit, MAX_PAGE_SIZE)
    if offset is None or offset < 0:
        offset = 0
    return limit, offset


class CatalogService:
    """
    Zapytania katalogu (lista, wyszukiwanie, polecane) oraz
    administracja produktami i kategoriami.
    Klient widzi tylko produkty z is_active = True.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.categories = CategoryRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def list_products(
        self,
        category: str | None = None,
        search: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Dict[str, Any]:
        limit, offset = clamp_pagination(limit, offset)
        search = search.strip() if search else None

        items, total = self.repo.search(
            category=category,
            search=search,
            min_price=min_price,
            max_price=max_price,
            limit=limit,
            offset=offset,
        )

        return {
            "items": items,
            "total": total,
            "limit": limit,
            "offset": offset,
            "has_more": offset + len(items) < total,
        }

    def featured(self) -> list[ProductModel]:
        return self.repo.featured(FEATURED_LIMIT)

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_active(product_id)
        if not product:
            raise NotFound("Product", product_id)
        return product

    def list_categories(self) -> list[CategoryModel]:
        return self.categories.list()

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_category(self, payload: CategoryIn) -> CategoryModel:
        if self.categories.get_by_name(payload.name):
            raise Conflict(f"Category {payload.name} already exists")

        category = self.categories.add(
            CategoryModel(name=payload.name, description=payload.description)
        )
        self.categories.commit()
        logger.info(f"Category {category.id} '{category.name}' created")
        return category

    def create_product(self, payload: ProductIn) -> ProductModel:
        self._check_category(payload.category_id)
        self._check_sale_price(payload.price, payload.sale_price)

        product = self.repo.add(ProductModel(**payload.model_dump()))
        self.repo.commit()
        logger.info(f"Product {product.id} '{product.name}' created, stock {product.stock}")
        return self.repo.refresh(product)

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        product = self.repo.get(product_id)
        if not product:
            raise NotFound("Product", product_id)

        changes = payload.model_dump(exclude_unset=True)
        # rating / review_count nie sa tu edytowalne, wylicza je ReviewService
        if "category_id" in changes:
            self._check_category(changes["category_id"])
        if "stock" in changes and changes["stock"] is None:
            raise ValidationError("Stock is required", fields={"stock": "must not be null"})
        self._check_sale_price(
            changes.get("price", product.price),
            changes.get("sale_price", product.sale_price),
        )

        for field, value in changes.items():
            setattr(product, field, value)

        self.repo.commit()
        logger.info(f"Product {product_id} updated: {sorted(changes)}")
        return self.repo.refresh(product)

    def deactivate_product(self, product_id: int) -> None:
        """Soft delete: produkt znika z katalogu, zostaje dla starych zamowien."""
        product = self.repo.get(product_id)
        if not product:
            raise NotFound("Product", product_id)

        product.is_active = False
        self.repo.commit()
        logger.info(f"Product {product_id} deactivated")

    def delete_product(self, product_id: int) -> None:
        """
        Twarde usuniecie. Recenzje ida razem z produktem, linie koszyka
        i pozycje zamowien trzymaja tylko product_id i zostaja.
        """
        product = self.repo.get(product_id)
        if not product:
            raise NotFound("Product", product_id)

        self.repo.delete(product)
        self.repo.commit()
        logger.info(f"Product {product_id} deleted")

    def _check_category(self, category_id: int | None) -> None:
        if category_id is not None and not self.categories.get(category_id):
            raise NotFound("Category", category_id)

    @staticmethod
    def _check_sale_price(price, sale_price) -> None:
        if price is None:
            raise ValidationError("Price is required", fields={"price": "must not be null"})
        if sale_price is not None and sale_price > price:
            raise ValidationError(
                "Sale price cannot exceed price",
                fields={"sale_price": "must be lower than or equal to price"},
            )
