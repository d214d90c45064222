from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.domain.errors import NotFound, ValidationError
from app.domain.schemas import ProductIn, ProductUpdate
from app.services.catalog_service import CatalogService, clamp_pagination


def names(products):
    return [p.name for p in products]


class TestListProducts:
    def test_only_active_products_are_listed(self, db, make_product):
        make_product(name="Visible")
        make_product(name="Hidden", is_active=False)

        page = CatalogService(db).list_products()

        assert names(page["items"]) == ["Visible"]
        assert page["total"] == 1

    def test_plain_listing_is_newest_first(self, db, make_product):
        now = datetime.now(timezone.utc)
        make_product(name="Old", created_at=now - timedelta(days=2))
        make_product(name="New", created_at=now)
        make_product(name="Middle", created_at=now - timedelta(days=1))

        page = CatalogService(db).list_products()

        assert names(page["items"]) == ["New", "Middle", "Old"]

    def test_search_ranks_name_then_description_then_category(self, db, make_product, make_category):
        watches = make_category("Watches")
        make_product(name="Leather Strap", category=watches)
        make_product(name="Weather Station", description="Watch the Weather from your desk")
        make_product(name="Smart Fitness Watch", description="Heart rate and GPS")
        make_product(name="Desk Lamp", description="Warm light")

        page = CatalogService(db).list_products(search="watch")

        assert names(page["items"]) == ["Smart Fitness Watch", "Weather Station", "Leather Strap"]
        assert page["total"] == 3

    def test_search_is_case_insensitive_and_alphabetical_within_rank(self, db, make_product):
        make_product(name="Zeta WATCH")
        make_product(name="alpha watch")
        make_product(name="Beta Watch")

        page = CatalogService(db).list_products(search="Watch")

        assert names(page["items"]) == ["alpha watch", "Beta Watch", "Zeta WATCH"]

    def test_search_wildcards_are_literal(self, db, make_product):
        make_product(name="Headphones")
        make_product(name="100% Cotton Shirt")

        assert names(CatalogService(db).list_products(search="%")["items"]) == ["100% Cotton Shirt"]
        assert CatalogService(db).list_products(search="_")["total"] == 0

    def test_search_skips_inactive_products(self, db, make_product):
        make_product(name="Old Watch", is_active=False)

        assert CatalogService(db).list_products(search="watch")["items"] == []

    def test_category_filter_ignores_case(self, db, make_product, make_category):
        electronics = make_category("Electronics")
        make_product(name="Headphones", category=electronics)
        make_product(name="Chair")

        page = CatalogService(db).list_products(category="electronics")

        assert names(page["items"]) == ["Headphones"]

    def test_price_filter_uses_sale_price(self, db, make_product):
        make_product(name="Chair", price="449.99", sale_price="99.99")
        make_product(name="Headphones", price="299.99")
        make_product(name="Cable", price="9.99")

        page = CatalogService(db).list_products(min_price=Decimal("50"), max_price=Decimal("150"))

        assert names(page["items"]) == ["Chair"]

    def test_pagination_reports_has_more(self, db, make_product):
        now = datetime.now(timezone.utc)
        for i in range(3):
            make_product(name=f"P{i}", created_at=now - timedelta(minutes=i))

        first = CatalogService(db).list_products(limit=2, offset=0)
        second = CatalogService(db).list_products(limit=2, offset=2)

        assert names(first["items"]) == ["P0", "P1"]
        assert first["has_more"] is True
        assert names(second["items"]) == ["P2"]
        assert second["has_more"] is False
        assert first["total"] == second["total"] == 3

    def test_bad_pagination_is_clamped(self, db, make_product):
        make_product()

        page = CatalogService(db).list_products(limit=-5, offset=-3)

        assert page["limit"] == 20
        assert page["offset"] == 0
        assert len(page["items"]) == 1


class TestClampPagination:
    def test_defaults(self):
        assert clamp_pagination(None, None) == (20, 0)

    def test_zero_limit(self):
        assert clamp_pagination(0, 5) == (20, 5)

    def test_limit_capped(self):
        assert clamp_pagination(1000, 0) == (100, 0)


class TestFeatured:
    def test_ordered_by_rating(self, db, make_product):
        for name, rating in (("A", "4.8"), ("B", "4.6"), ("C", "4.7"), ("D", "4.5")):
            make_product(name=name, rating=rating)

        featured = CatalogService(db).featured()

        assert [p.rating for p in featured] == [
            Decimal("4.8"),
            Decimal("4.7"),
            Decimal("4.6"),
            Decimal("4.5"),
        ]

    def test_ties_keep_insertion_order_and_limit_is_six(self, db, make_product):
        for i in range(8):
            make_product(name=f"P{i}", rating="4.0")
        make_product(name="Hidden", rating="5.0", is_active=False)

        featured = CatalogService(db).featured()

        assert names(featured) == ["P0", "P1", "P2", "P3", "P4", "P5"]


class TestProductAdmin:
    def test_get_inactive_product_is_not_found(self, db, make_product):
        product = make_product(is_active=False)

        with pytest.raises(NotFound):
            CatalogService(db).get_product(product.id)

    def test_create_product_with_unknown_category(self, db):
        with pytest.raises(NotFound):
            CatalogService(db).create_product(ProductIn(name="X", price=Decimal("1.00"), category_id=99))

    def test_sale_price_cannot_exceed_price(self, db, make_product):
        product = make_product(price="10.00")

        with pytest.raises(ValidationError):
            CatalogService(db).update_product(product.id, ProductUpdate(sale_price=Decimal("12.00")))

    def test_deactivate_keeps_row(self, db, make_product):
        product = make_product()

        CatalogService(db).deactivate_product(product.id)

        db.refresh(product)
        assert product.is_active is False
        assert CatalogService(db).list_products()["total"] == 0
