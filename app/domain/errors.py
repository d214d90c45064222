# app/domain/errors.py
"""
Taksonomia bledow domeny sklepu.

Kazdy blad niesie status HTTP, na ktory router go tlumaczy:

- ValidationError (400) - zle dane wejsciowe, z lista pol
- NotFound (404) - brak encji
- Conflict (409) - wyscig o stan magazynu / duplikat
- InvalidTransition (409) - niedozwolona zmiana statusu zamowienia
- InternalFault (500) - blad infrastruktury, nieprzezroczysty dla klienta
"""
from typing import Any, Dict, List


class StoreError(Exception):
    status_code = 500
    code = "store_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


class ValidationError(StoreError):
    status_code = 400
    code = "validation_error"

    def __init__(self, message: str, fields: Dict[str, str] | None = None):
        super().__init__(message)
        self.fields = fields or {}

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail["fields"] = self.fields
        return detail


class InsufficientStock(ValidationError):
    code = "insufficient_stock"

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for product {product_id}: requested {requested}, available {available}",
            fields={"quantity": f"at most {available} available"},
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class EmptyCart(ValidationError):
    code = "empty_cart"

    def __init__(self, session_id: str):
        super().__init__(f"Cart {session_id} is empty")
        self.session_id = session_id


class NotFound(StoreError):
    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class Conflict(StoreError):
    status_code = 409
    code = "conflict"


class ProductUnavailable(Conflict):
    code = "product_unavailable"

    def __init__(self, product_id: int, reason: str):
        super().__init__(f"Product {product_id} is unavailable: {reason}")
        self.product_id = product_id
        self.reason = reason

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail["product_id"] = self.product_id
        return detail


class InvalidTransition(StoreError):
    status_code = 409
    code = "invalid_transition"

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change order status from {current} to {requested}")
        self.current = current
        self.requested = requested


class InternalFault(StoreError):
    status_code = 500
    code = "internal_fault"

    def __init__(self, message: str = "Internal error"):
        super().__init__(message)


def field_errors(errors: List[Dict[str, Any]]) -> Dict[str, str]:
    """Splaszcza liste bledow pydantic do {pole: komunikat}."""
    fields = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        fields[".".join(loc) or "__root__"] = err.get("msg", "invalid value")
    return fields
