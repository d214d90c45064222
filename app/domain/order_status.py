# app/domain/order_status.py
from enum import Enum

from app.domain.errors import InvalidTransition


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# tylko do przodu + anulowanie z pending/processing
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def can_transition(current: OrderStatus, requested: OrderStatus) -> bool:
    return requested in ALLOWED_TRANSITIONS[current]


def check_transition(current: str, requested: str) -> OrderStatus:
    """Zwraca docelowy status albo rzuca InvalidTransition."""
    try:
        current_status = OrderStatus(current)
        requested_status = OrderStatus(requested)
    except ValueError:
        raise InvalidTransition(current, requested)

    if not can_transition(current_status, requested_status):
        raise InvalidTransition(current_status.value, requested_status.value)

    return requested_status
