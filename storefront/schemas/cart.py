# storefront/schemas/cart.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class CartItemAdd(SQLModel):
    """
    Payload for adding to cart.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = Field(default=1, ge=1, le=99)
    options: dict[str, str] = {}


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart line.
    quantity=0 removes the line.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = Field(ge=0, le=99)
    options: dict[str, str] = {}


class GuestCartLine(SQLModel):
    product: uuid.UUID
    quantity: int = Field(ge=1, le=99)
    selected_options: dict[str, str] = {}


class CartMerge(SQLModel):
    """
    Lines collected while browsing anonymously, merged on login.
    """

    guest_cart: list[GuestCartLine]


class CartItemRead(SQLModel):
    id: uuid.UUID
    product_id: uuid.UUID
    name: str
    price: float
    image: str
    quantity: int
    selected_options: dict[str, str]
    line_total: float


class CartRead(SQLModel):
    """
    Full cart response model with totals.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    items: list[CartItemRead]
    total_items: int
    total_price: float
    is_empty: bool
    updated_at: datetime
