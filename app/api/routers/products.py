# app/api/routers/products.py
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.api.deps import http_error
from app.data.database import get_db
from app.domain.errors import StoreError
from app.domain.schemas import (
    CategoryIn,
    CategoryOut,
    ProductDetailOut,
    ProductIn,
    ProductOut,
    ProductPage,
    ProductUpdate,
    ReviewOut,
)
from app.services.catalog_service import CatalogService
from app.services.review_service import ReviewService

router = APIRouter(prefix="/products", tags=["products"])
categories_router = APIRouter(prefix="/categories", tags=["categories"])


def get_service(db: Session):
    return CatalogService(db)


@router.get("", response_model=ProductPage)
def list_products(
    category: str | None = Query(None),
    search: str | None = Query(None),
    min_price: Decimal | None = Query(None),
    max_price: Decimal | None = Query(None),
    limit: int = Query(20),
    offset: int = Query(0),
    db: Session = Depends(get_db),
):
    """Lista / wyszukiwanie aktywnych produktow ze stronicowaniem."""
    svc = get_service(db)
    return svc.list_products(
        category=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        limit=limit,
        offset=offset,
    )


@router.get("/featured", response_model=list[ProductOut])
def featured_products(db: Session = Depends(get_db)):
    return get_service(db).featured()


@router.get("/{product_id}", response_model=ProductDetailOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_product(product_id)
    except StoreError as e:
        raise http_error(e)


@router.get("/{product_id}/reviews", response_model=list[ReviewOut])
def list_reviews(product_id: int, db: Session = Depends(get_db)):
    try:
        return ReviewService(db).list_reviews(product_id)
    except StoreError as e:
        raise http_error(e)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.create_product(payload)
    except StoreError as e:
        raise http_error(e)


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.update_product(product_id, payload)
    except StoreError as e:
        raise http_error(e)


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: int,
    hard: bool = Query(False, description="True = usun wiersz, False = tylko dezaktywuj"),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        if hard:
            svc.delete_product(product_id)
        else:
            svc.deactivate_product(product_id)
    except StoreError as e:
        raise http_error(e)
    return Response(status_code=204)


@categories_router.get("", response_model=list[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return get_service(db).list_categories()


@categories_router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryIn, db: Session = Depends(get_db)):
    try:
        return get_service(db).create_category(payload)
    except StoreError as e:
        raise http_error(e)
