# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import List
from decimal import Decimal
from datetime import datetime

from app.domain.order_status import OrderStatus


# =====================================================
# KATALOG
# =====================================================
class CategoryIn(BaseModel):
    """Schema dla tworzenia kategorii."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class CategoryOut(BaseModel):
    """Schema dla kategorii (response)."""

    id: int
    name: str
    description: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProductIn(BaseModel):
    """Schema dla tworzenia produktu."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    image_url: str | None = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    sale_price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    category_id: int | None = None
    stock: int = Field(0, ge=0, description="Stan magazynowy (>= 0)")
    is_active: bool = True


class ProductUpdate(BaseModel):
    """Schema dla czesciowej aktualizacji produktu."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    image_url: str | None = None
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    sale_price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    category_id: int | None = None
    stock: int | None = Field(None, ge=0)
    is_active: bool | None = None


class ProductOut(BaseModel):
    """Schema dla produktu (response)."""

    id: int
    name: str
    description: str
    image_url: str | None = None
    price: Decimal
    sale_price: Decimal | None = None
    category_id: int | None = None
    category: str | None = Field(None, validation_alias="category_name")
    stock: int
    is_active: bool
    rating: Decimal
    review_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewOut(BaseModel):
    """Schema dla recenzji (response)."""

    id: int
    product_id: int
    customer_id: int
    rating: int
    title: str
    comment: str
    is_verified: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductDetailOut(ProductOut):
    """Produkt razem z recenzjami (najnowsze pierwsze)."""

    reviews: List[ReviewOut] = []


class ProductPage(BaseModel):
    """Strona wynikow listowania / wyszukiwania."""

    items: List[ProductOut]
    total: int
    limit: int
    offset: int
    has_more: bool


# =====================================================
# KOSZYK
# =====================================================
class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    quantity: int = Field(1, gt=0, description="Ilosc produktu (musi byc > 0)")


class CartQuantityIn(BaseModel):
    """Nowa ilosc; <= 0 usuwa linie."""

    quantity: int


class CartLineOut(BaseModel):
    """Schema dla linii koszyka (response), z biezacym stanem produktu."""

    id: int
    session_id: str
    product_id: int
    quantity: int
    available: bool = True
    product: ProductOut | None = None
    line_total: Decimal | None = None


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    session_id: str
    items: List[CartLineOut]
    subtotal: Decimal


# =====================================================
# KLIENCI
# =====================================================
class AddressIn(BaseModel):
    """Adres wysylki / platnosci."""

    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str | None = None
    zip_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)


class CustomerIn(BaseModel):
    """Schema dla tworzenia klienta."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = None
    address: AddressIn | None = None


class CustomerOut(BaseModel):
    """Schema dla klienta (response)."""

    id: int
    name: str
    email: str
    phone: str | None = None
    address: dict | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# ZAMOWIENIA
# =====================================================
class CheckoutIn(BaseModel):
    """Schema dla checkoutu koszyka."""

    session_id: str = Field(..., min_length=1, max_length=100)
    customer: CustomerIn
    shipping_address: AddressIn
    billing_address: AddressIn | None = None


class OrderItemOut(BaseModel):
    """Pozycja zamowienia - snapshot z chwili zakupu."""

    id: int
    product_id: int
    product_name: str
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamowienia (response)."""

    id: int
    customer_id: int
    session_id: str | None = None
    status: OrderStatus
    total: Decimal
    shipping_address: dict
    billing_address: dict
    items: List[OrderItemOut] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderDetailOut(OrderOut):
    """Zamowienie z danymi klienta."""

    customer: CustomerOut | None = None


class OrderStatusIn(BaseModel):
    """Zmiana statusu zamowienia."""

    status: OrderStatus


# =====================================================
# RECENZJE / STATYSTYKI / NEWSLETTER
# =====================================================
class ReviewIn(BaseModel):
    """Schema dla dodawania recenzji."""

    product_id: int = Field(..., gt=0)
    customer_id: int = Field(..., gt=0)
    rating: int = Field(..., ge=1, le=5, description="Ocena 1..5")
    title: str = Field(..., min_length=1, max_length=200)
    comment: str = ""


class StatsOut(BaseModel):
    """Statystyki sklepu."""

    total_orders: int
    total_revenue: Decimal
    average_order_value: Decimal
    top_products: List[ProductOut]


class NewsletterIn(BaseModel):
    """Zapis do newslettera."""

    email: EmailStr


class NewsletterOut(BaseModel):
    id: int
    email: str
    subscribed_at: datetime

    model_config = ConfigDict(from_attributes=True)
