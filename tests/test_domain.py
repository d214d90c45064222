from decimal import Decimal

import pydantic
import pytest

from app.domain.errors import InvalidTransition, ProductUnavailable, ValidationError, field_errors
from app.domain.money import order_total, round_money, round_rating
from app.domain.order_status import OrderStatus, can_transition, check_transition
from app.domain.schemas import CustomerIn, NewsletterIn


class TestMoney:
    def test_round_half_up_to_cents(self):
        assert round_money(Decimal("2.345")) == Decimal("2.35")
        assert round_money(Decimal("2.344")) == Decimal("2.34")
        assert round_money(Decimal("0.005")) == Decimal("0.01")

    def test_float_input_goes_through_str(self):
        assert round_money(0.1 + 0.2) == Decimal("0.30")

    def test_order_total_is_exact(self):
        # 3 * 0.10 w floatach daje 0.30000000000000004
        assert order_total([(3, Decimal("0.10")), (1, Decimal("19.99"))]) == Decimal("20.29")

    def test_order_total_rounds_once_at_the_end(self):
        assert order_total([(1, Decimal("0.005")), (1, Decimal("0.005"))]) == Decimal("0.01")

    def test_empty_total(self):
        assert order_total([]) == Decimal("0.00")

    def test_rating_rounds_half_up(self):
        assert round_rating(Decimal("4.25")) == Decimal("4.3")
        assert round_rating(Decimal("4.333")) == Decimal("4.3")


class TestOrderStatus:
    @pytest.mark.parametrize(
        "current, requested",
        [
            ("pending", "processing"),
            ("processing", "shipped"),
            ("shipped", "delivered"),
            ("pending", "cancelled"),
            ("processing", "cancelled"),
        ],
    )
    def test_allowed(self, current, requested):
        assert check_transition(current, requested) == OrderStatus(requested)

    @pytest.mark.parametrize(
        "current, requested",
        [
            ("delivered", "pending"),
            ("shipped", "cancelled"),
            ("delivered", "cancelled"),
            ("cancelled", "pending"),
            ("pending", "shipped"),
            ("pending", "pending"),
            ("processing", "pending"),
        ],
    )
    def test_rejected(self, current, requested):
        with pytest.raises(InvalidTransition):
            check_transition(current, requested)

    def test_unknown_status_is_rejected(self):
        with pytest.raises(InvalidTransition):
            check_transition("pending", "lost")

    def test_terminal_states(self):
        for status in OrderStatus:
            assert not can_transition(OrderStatus.DELIVERED, status)
            assert not can_transition(OrderStatus.CANCELLED, status)


class TestErrors:
    def test_status_codes(self):
        assert ValidationError("x").status_code == 400
        assert ProductUnavailable(3, "gone").status_code == 409
        assert InvalidTransition("delivered", "pending").status_code == 409

    def test_product_unavailable_detail(self):
        detail = ProductUnavailable(7, "product is inactive").to_detail()
        assert detail["code"] == "product_unavailable"
        assert detail["product_id"] == 7

    def test_field_errors_flattens_pydantic_locations(self):
        errors = [
            {"loc": ("body", "rating"), "msg": "Input should be less than or equal to 5"},
            {"loc": ("body", "shipping_address", "city"), "msg": "Field required"},
        ]
        assert field_errors(errors) == {
            "rating": "Input should be less than or equal to 5",
            "shipping_address.city": "Field required",
        }


class TestEmailSchemas:
    @pytest.mark.parametrize("email", ["jane", "jane@", "@example.com", "jane doe@example.com"])
    def test_customer_rejects_bad_email(self, email):
        with pytest.raises(pydantic.ValidationError) as exc:
            CustomerIn(name="Jane Doe", email=email)
        assert field_errors(exc.value.errors()).keys() == {"email"}

    def test_newsletter_rejects_bad_email(self):
        with pytest.raises(pydantic.ValidationError):
            NewsletterIn(email="fan")

    def test_valid_email(self):
        assert NewsletterIn(email="fan@example.com").email == "fan@example.com"
