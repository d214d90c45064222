# app/api/routers/orders.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import http_error, lock_service
from app.data.database import get_db
from app.domain.errors import StoreError
from app.domain.schemas import CheckoutIn, OrderDetailOut, OrderOut, OrderStatusIn
from app.services.lock_service import BaseLockService
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session, locks: BaseLockService):
    return OrderService(db, lock_service=locks)


@router.post("", response_model=OrderOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    db: Session = Depends(get_db),
    locks: BaseLockService = Depends(lock_service),
):
    """
    Tworzy zamówienie z koszyka sesji.
    Wysyła powiadomienie asynchronicznie.
    """
    svc = get_service(db, locks)
    try:
        return svc.checkout(payload)
    except StoreError as e:
        raise http_error(e)


@router.get("/{order_id}", response_model=OrderDetailOut)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    locks: BaseLockService = Depends(lock_service),
):
    """
    Pobiera szczegóły zamówienia z pozycjami i klientem.
    """
    svc = get_service(db, locks)
    try:
        return svc.get_order(order_id)
    except StoreError as e:
        raise http_error(e)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: OrderStatusIn,
    db: Session = Depends(get_db),
    locks: BaseLockService = Depends(lock_service),
):
    svc = get_service(db, locks)
    try:
        return svc.update_status(order_id, payload.status.value)
    except StoreError as e:
        raise http_error(e)
