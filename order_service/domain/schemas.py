# order_service/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from decimal import Decimal
from datetime import datetime


class CamelModel(BaseModel):
    """Baza dla schematow API - JSON w camelCase, python w snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ItemIn(CamelModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(..., min_length=1, description="ID produktu")
    quantity: int = Field(1, gt=0, description="Ilosc produktu (musi byc > 0)")


class ItemQuantityIn(CamelModel):
    """Schema dla zmiany ilosci produktu w koszyku."""

    quantity: int = Field(..., gt=0, description="Nowa ilosc (musi byc > 0)")


class CartItemOut(CamelModel):
    """Linia koszyka wzbogacona o dane z katalogu (response)."""

    product_id: str
    name: str
    price: Decimal
    quantity: int
    image: Optional[str] = None
    subtotal: Decimal


class CartOut(CamelModel):
    """Schema dla koszyka (response)."""

    items: List[CartItemOut]
    total: Decimal


class ShippingAddress(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    street: str = Field(..., min_length=1, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=40)


class OrderCreate(CamelModel):
    """Schema dla tworzenia zamowienia z koszyka zalogowanego usera."""

    shipping_address: ShippingAddress


class OrderStatusIn(CamelModel):
    # walidacja wartosci w OrderStatusPolicy (400 zamiast 422)
    status: str = Field(..., min_length=1)


class OrderItemOut(CamelModel):
    product_id: str
    name: str
    price: Decimal
    quantity: int
    image: Optional[str] = None


class OrderOut(CamelModel):
    """Schema dla zamowienia (response)."""

    id: str
    user_id: str
    items: List[OrderItemOut]
    total_amount: Decimal
    status: str
    payment_status: str
    payment_id: Optional[str] = None
    tracking_number: Optional[str] = None
    shipping_address: dict
    created_at: datetime
    updated_at: datetime

