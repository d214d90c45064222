# app/api/routers/customers.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import http_error, lock_service
from app.data.database import get_db
from app.domain.errors import StoreError
from app.domain.schemas import CustomerIn, CustomerOut, OrderOut
from app.services.customer_service import CustomerService
from app.services.lock_service import BaseLockService
from app.services.order_service import OrderService

router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("", response_model=CustomerOut, status_code=201)
def create_customer(payload: CustomerIn, db: Session = Depends(get_db)):
    try:
        return CustomerService(db).create_customer(payload)
    except StoreError as e:
        raise http_error(e)


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    try:
        return CustomerService(db).get_customer(customer_id)
    except StoreError as e:
        raise http_error(e)


@router.get("/{customer_id}/orders", response_model=list[OrderOut])
def list_customer_orders(
    customer_id: int,
    db: Session = Depends(get_db),
    locks: BaseLockService = Depends(lock_service),
):
    try:
        return OrderService(db, lock_service=locks).list_customer_orders(customer_id)
    except StoreError as e:
        raise http_error(e)
