from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.orm import Session
from app.data.models.cart_line import CartLineModel
from app.domain.errors import InsufficientStock, NotFound, ValidationError
from app.domain.money import line_total, round_money
from app.domain.schemas import ProductOut
from app.repos.cart_repo import CartRepo
from app.repos.product_repo import ProductRepo
from app.services.lock_service import BaseLockService, cart_lock_key
from app.utils.logging import get_logger

logger = get_logger(__name__)

class CartService:
    """
    Prosta implementacja cqrs i proste use case dla domeny cart
    commands (add, set quantity, remove, clear) modyfikuja stan
    query (get) tylko odczyt

    Koszyk to linie (session_id, product_id) - najwyzej jedna na pare.
    Zmiany jednego wlasciciela sa serializowane lockiem cart:{session}:lock,
    wiec rownolegle add / update nie gubia sobie ilosci.
    Stan magazynu sprawdzany tu jest tylko doradczo, checkout sprawdza go ponownie.
    """

    def __init__(self, db: Session, lock_service: BaseLockService):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.lock_service = lock_service

    #query - odczyt
    def get_cart(self, session_id: str) -> Dict[str, Any]:
        items = [self.line_view(line) for line in self.repo.list_lines(session_id)]
        subtotal = sum(
            (item["line_total"] for item in items if item["available"]),
            Decimal("0.00"),
        )

        #dict przyksztalcany w jsona
        return {
            "session_id": session_id,
            "items": items,
            "subtotal": round_money(subtotal),
        }

    def line_view(self, line: CartLineModel) -> Dict[str, Any]:
        """Linia koszyka z biezacym produktem (ceny i stan na zywo, zamrazane dopiero przy checkoucie)."""
        product = self.products.get_fresh(line.product_id)
        available = bool(product and product.is_active)
        return {
            "id": line.id,
            "session_id": line.session_id,
            "product_id": line.product_id,
            "quantity": line.quantity,
            "available": available,
            "product": ProductOut.model_validate(product) if product else None,
            "line_total": round_money(line_total(line.quantity, product.unit_price)) if available else None,
        }

    #commands
    def add_item(self, session_id: str, product_id: int, quantity: int) -> CartLineModel:
        # Walidacje przed jakimkolwiek zapisem
        if not session_id:
            raise ValidationError("Session id is required", fields={"session_id": "must not be empty"})
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0", fields={"quantity": "must be > 0"})

        with self.lock_service.hold([cart_lock_key(session_id)]):
            try:
                product = self._live_product(product_id)

                # Sprawdz czy produkt juz jest w koszyku
                existing = self.repo.get_line_for_product(session_id, product_id)
                new_quantity = quantity + (existing.quantity if existing else 0)

                # walidacja wynikowej ilosci, nie tylko dodawanej
                if new_quantity > product.stock:
                    raise InsufficientStock(product_id, new_quantity, product.stock)

                if existing:
                    logger.info(
                        f"Product {product_id} already in cart {session_id}, "
                        f"quantity {existing.quantity} -> {new_quantity}"
                    )
                    existing.quantity = new_quantity
                    line = existing
                    self.repo.db.flush()
                else:
                    logger.info(f"Adding product {product_id} x{quantity} to cart {session_id}")
                    line = self.repo.add(
                        CartLineModel(
                            session_id=session_id,
                            product_id=product_id,
                            quantity=quantity,
                        )
                    )

                self.repo.commit()
                return line

            except Exception:
                self.repo.rollback()
                raise

    def set_quantity(self, line_id: int, quantity: int) -> CartLineModel | None:
        """
        Ustawia ilosc w linii. quantity <= 0 dziala jak remove i zwraca None.
        """
        line = self.repo.get_line(line_id)
        if not line:
            raise NotFound("Cart line", line_id)

        if quantity <= 0:
            self.remove(line_id)
            return None

        with self.lock_service.hold([cart_lock_key(line.session_id)]):
            try:
                # ponowny odczyt pod lockiem - linia mogla zniknac
                line = self.repo.get_line(line_id)
                if not line:
                    raise NotFound("Cart line", line_id)

                product = self._live_product(line.product_id)
                if quantity > product.stock:
                    raise InsufficientStock(line.product_id, quantity, product.stock)

                logger.info(f"Cart line {line_id}: quantity {line.quantity} -> {quantity}")
                line.quantity = quantity
                self.repo.db.flush()
                self.repo.commit()
                return line

            except Exception:
                self.repo.rollback()
                raise

    def remove(self, line_id: int) -> bool:
        line = self.repo.get_line(line_id)
        if not line:
            return False

        with self.lock_service.hold([cart_lock_key(line.session_id)]):
            line = self.repo.get_line(line_id)
            if not line:
                return False

            logger.info(f"Removing cart line {line_id} (product {line.product_id}) from cart {line.session_id}")
            self.repo.delete(line)
            self.repo.commit()
            return True

    def clear(self, session_id: str) -> int:
        with self.lock_service.hold([cart_lock_key(session_id)]):
            removed = self.repo.clear(session_id)
            self.repo.commit()

        logger.info(f"Cart {session_id} cleared, {removed} line(s) removed")
        return removed

    def _live_product(self, product_id: int):
        # swiezy odczyt stanu, nie z cache sesji
        product = self.products.get_fresh(product_id)
        if not product or not product.is_active:
            raise NotFound("Product", product_id)
        return product
