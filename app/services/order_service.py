# app/services/order_service.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.domain.errors import Conflict, EmptyCart, InvalidTransition, NotFound, ProductUnavailable
from app.domain.money import order_total, round_money
from app.domain.order_status import OrderStatus, check_transition
from app.domain.schemas import CheckoutIn, ProductOut
from app.repos.cart_repo import CartRepo
from app.repos.order_repo import OrderRepo
from app.repos.product_repo import ProductRepo
from app.services.customer_service import CustomerService
from app.services.lock_service import (
    BaseLockService,
    cart_lock_key,
    customer_lock_key,
    order_lock_key,
    product_lock_key,
)
from app.services.notification_service import NotificationService
from app.utils.settings import TOP_PRODUCTS_LIMIT
from app.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Separacja od CartService zgodnie z wymaganiami.

    Checkout jest atomowy wzgledem koszyka wlasciciela: albo powstaje
    zamowienie z pozycjami, stan magazynu spada i koszyk jest pusty,
    albo nic sie nie zmienia.
    """

    def __init__(
        self,
        db: Session,
        lock_service: BaseLockService,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.customers = CustomerService(db)
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    def checkout(self, payload: CheckoutIn) -> OrderModel:
        """
        Use Case: Tworzenie zamówienia z koszyka.

        1. Pobiera linie koszyka (pusty -> EmptyCart)
        2. Pod lockami produktow ponownie czyta kazdy produkt
           (brak / nieaktywny / za maly stan -> ProductUnavailable, bez czesciowych zamowien)
        3. Oblicza total na Decimal, half-up do groszy
        4. Zdejmuje stan warunkowym UPDATE
        5. Tworzy zamowienie + pozycje
        6. Czysci koszyk
        7. Wysyła powiadomienie (fire-and-forget, po commicie)
        """
        session_id = payload.session_id
        shipping = payload.shipping_address.model_dump()
        billing = (payload.billing_address or payload.shipping_address).model_dump()

        with self.lock_service.hold([cart_lock_key(session_id)]):
            lines = self.carts.list_lines(session_id)
            if not lines:
                raise EmptyCart(session_id)

            # lock klienta: dwa checkouty z tym samym nowym emailem nie tworza dwoch klientow
            keys = [product_lock_key(line.product_id) for line in lines]
            keys.append(customer_lock_key(payload.customer.email))
            with self.lock_service.hold(keys):
                try:
                    order = self._place_order(session_id, lines, payload, shipping, billing)
                except IntegrityError:
                    self.repo.rollback()
                    logger.warning(f"Checkout of cart {session_id} hit a concurrent write")
                    raise Conflict("Checkout conflicted with a concurrent write, retry")
                except Exception:
                    self.repo.rollback()
                    raise

        logger.info(
            f"Order {order.id} created from cart {session_id}: "
            f"{len(order.items)} item(s), total {order.total}"
        )

        # Wyślij powiadomienie asynchronicznie, blad nie cofa zamowienia
        self.notification_service.send_order_notification(
            session_id, order.id, order.total, len(order.items)
        )

        return order

    def _place_order(self, session_id, lines, payload: CheckoutIn, shipping, billing) -> OrderModel:
        snapshots = []
        for line in lines:
            product = self.products.get_for_update(line.product_id)
            if product is None:
                raise ProductUnavailable(line.product_id, "product no longer exists")
            if not product.is_active:
                raise ProductUnavailable(line.product_id, "product is inactive")
            if product.stock < line.quantity:
                raise ProductUnavailable(
                    line.product_id,
                    f"requested {line.quantity}, only {product.stock} in stock",
                )
            snapshots.append((line, product, product.unit_price))

        total = order_total((line.quantity, price) for line, _, price in snapshots)

        # warunkowy UPDATE to druga linia obrony, gdyby ktos zmienil stan poza lockiem
        for line, product, _ in snapshots:
            if self.products.decrement_stock(product.id, line.quantity) == 0:
                logger.warning(f"Stock race lost for product {product.id} in cart {session_id}")
                raise ProductUnavailable(product.id, "stock changed during checkout")

        customer = self.customers.get_or_create(payload.customer)

        order = self.repo.add(
            OrderModel(
                customer_id=customer.id,
                session_id=session_id,
                status=OrderStatus.PENDING.value,
                total=total,
                shipping_address=shipping,
                billing_address=billing,
            )
        )
        for line, product, price in snapshots:
            order.items.append(
                OrderItemModel(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=line.quantity,
                    price=price,
                )
            )

        self.carts.clear(session_id)
        self.repo.commit()
        return order

    def get_order(self, order_id: int) -> OrderModel:
        """
        Use Case: Pobranie zamówienia (Query).
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFound("Order", order_id)

        return order

    def list_customer_orders(self, customer_id: int) -> list[OrderModel]:
        self.customers.get_customer(customer_id)
        return self.repo.list_by_customer(customer_id)

    def update_status(self, order_id: int, status: str) -> OrderModel:
        """
        pending -> processing -> shipped -> delivered, anulowanie z pending/processing.
        Anulowanie oddaje ilosci na stan produktow, ktore jeszcze istnieja.

        Zmiana idzie pod lockiem zamowienia i lockami jego produktow,
        wiec dwa rownolegle anulowania nie oddadza stanu dwa razy.
        """
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound("Order", order_id)

        keys = [order_lock_key(order_id)]
        keys.extend(product_lock_key(item.product_id) for item in order.items)

        with self.lock_service.hold(keys):
            try:
                # ponowny odczyt pod lockiem - status mogl sie zmienic
                order = self.repo.get_order_for_update(order_id)
                previous = order.status
                new_status = check_transition(previous, status)

                if self.repo.set_status(order_id, previous, new_status.value, datetime.now(timezone.utc)) == 0:
                    logger.warning(f"Order {order_id} status changed concurrently")
                    raise InvalidTransition(previous, new_status.value)

                if new_status is OrderStatus.CANCELLED:
                    for item in order.items:
                        if self.products.increment_stock(item.product_id, item.quantity) == 0:
                            logger.info(f"Product {item.product_id} gone, stock of order {order_id} not restored")

                self.repo.commit()
            except Exception:
                self.repo.rollback()
                raise

        logger.info(f"Order {order_id}: {previous} -> {order.status}")
        return order

    def stats(self) -> Dict[str, Any]:
        cancelled = OrderStatus.CANCELLED.value
        total_orders, revenue = self.repo.revenue_summary(exclude_status=cancelled)
        revenue = round_money(revenue)
        average = round_money(revenue / total_orders) if total_orders else Decimal("0.00")

        top_products = [
            ProductOut.model_validate(self.products.get(product_id))
            for product_id, _units in self.repo.top_selling_product_ids(cancelled, TOP_PRODUCTS_LIMIT)
        ]

        return {
            "total_orders": total_orders,
            "total_revenue": revenue,
            "average_order_value": average,
            "top_products": top_products,
        }
