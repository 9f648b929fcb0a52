# storefront/core/pricing.py
from typing import Iterable, Protocol

from pydantic import ConfigDict
from sqlmodel import SQLModel

# Fixed tax rate (8%)
TAX_RATE = 0.08

# Flat shipping fee, waived once the subtotal reaches the threshold
SHIPPING_FEE = 9.99
FREE_SHIPPING_THRESHOLD = 100.0


class PriceSnapshot(SQLModel):
    """
    Name/price/image of a product frozen at the moment it was put in a cart
    (or bought). Later edits to the product never reach a snapshot.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: float
    image: str = ""


class Charges(SQLModel):
    """
    Amounts charged for an order.

    total_price == items_price + tax_price + shipping_price
    """

    model_config = ConfigDict(frozen=True)

    items_price: float
    tax_price: float
    shipping_price: float
    total_price: float


class PricedLine(Protocol):
    price: float
    quantity: int


def snapshot_of(product) -> PriceSnapshot:
    """Take a price snapshot from a live product record."""
    image = product.images[0].get("url", "") if product.images else ""
    return PriceSnapshot(name=product.name, price=product.price, image=image)


def subtotal_of(lines: Iterable[PricedLine]) -> float:
    return round(sum(line.price * line.quantity for line in lines), 2)


def compute_charges(subtotal: float) -> Charges:
    """
    Derive tax, shipping and total from a subtotal.

    - tax = subtotal * TAX_RATE
    - shipping = SHIPPING_FEE unless subtotal reaches FREE_SHIPPING_THRESHOLD
    """
    tax_price = round(subtotal * TAX_RATE, 2)
    shipping_price = 0.0 if subtotal >= FREE_SHIPPING_THRESHOLD else SHIPPING_FEE
    total_price = round(subtotal + tax_price + shipping_price, 2)
    return Charges(
        items_price=round(subtotal, 2),
        tax_price=tax_price,
        shipping_price=shipping_price,
        total_price=total_price,
    )
