# storefront/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

PaymentMethod = Literal["credit_card", "debit_card", "paypal", "stripe"]
OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]


class Address(SQLModel):
    model_config = ConfigDict(extra="forbid")

    street: str
    city: str
    state: str
    zip_code: str
    country: str

    @field_validator("street", "city", "state", "zip_code", "country")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class OrderCreate(SQLModel):
    """
    Payload for creating an order from the current cart.

    Backend derives:
      - user_id from token
      - status = 'pending'
      - items and charges from cart
      - billing_address = shipping_address when omitted
    """

    model_config = ConfigDict(extra="forbid")

    shipping_address: Address
    billing_address: Address | None = None
    payment_method: PaymentMethod
    notes: str | None = Field(default=None, max_length=500)

    @field_validator("notes", mode="before")
    @classmethod
    def normalize_notes(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status / tracking info.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus | None = None
    tracking_number: str | None = None
    notes: str | None = Field(default=None, max_length=500)


class OrderItemRead(SQLModel):
    product_id: uuid.UUID
    name: str
    price: float
    image: str
    quantity: int
    line_total: float


class OrderRead(SQLModel):
    """
    Full order view including items and charges.
    """

    id: uuid.UUID
    order_number: str
    user_id: uuid.UUID
    items: list[OrderItemRead]
    shipping_address: Address
    billing_address: Address
    payment_method: PaymentMethod
    items_price: float
    tax_price: float
    shipping_price: float
    total_price: float
    status: OrderStatus
    tracking_number: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
