#app/api/routers/carts.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import http_error, lock_service
from app.data.database import get_db
from app.domain.errors import NotFound, StoreError
from app.domain.schemas import (
    CartItemIn,
    CartLineOut,
    CartOut,
    CartQuantityIn,
)
from app.services.cart_service import CartService
from app.services.lock_service import BaseLockService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session, locks: BaseLockService):
    return CartService(db=db, lock_service=locks)


@router.get("/{session_id}", response_model=CartOut)
def get_cart(
    session_id: str,
    db: Session = Depends(get_db),
    locks: BaseLockService = Depends(lock_service),
):
    return get_service(db, locks).get_cart(session_id)


@router.post("/{session_id}/items", response_model=CartLineOut, status_code=201)
def add_item(
    session_id: str,
    payload: CartItemIn,
    db: Session = Depends(get_db),
    locks: BaseLockService = Depends(lock_service),
):
    svc = get_service(db, locks)
    try:
        line = svc.add_item(session_id, payload.product_id, payload.quantity)
        return svc.line_view(line)
    except StoreError as e:
        raise http_error(e)


@router.patch("/items/{line_id}", response_model=CartLineOut)
def update_item(
    line_id: int,
    payload: CartQuantityIn,
    db: Session = Depends(get_db),
    locks: BaseLockService = Depends(lock_service),
):
    svc = get_service(db, locks)
    try:
        line = svc.set_quantity(line_id, payload.quantity)
    except StoreError as e:
        raise http_error(e)

    if line is None:
        return Response(status_code=204)
    return svc.line_view(line)


@router.delete("/items/{line_id}", status_code=204)
def remove_item(
    line_id: int,
    db: Session = Depends(get_db),
    locks: BaseLockService = Depends(lock_service),
):
    svc = get_service(db, locks)
    try:
        if not svc.remove(line_id):
            raise NotFound("Cart line", line_id)
    except StoreError as e:
        raise http_error(e)
    return Response(status_code=204)


@router.delete("/{session_id}", status_code=204)
def clear_cart(
    session_id: str,
    db: Session = Depends(get_db),
    locks: BaseLockService = Depends(lock_service),
):
    try:
        get_service(db, locks).clear(session_id)
    except StoreError as e:
        raise http_error(e)
    return Response(status_code=204)
