# storefront/services/cart_lines.py
"""
In-memory cart mutations.

These functions only touch the Cart object graph; persisting it is the
caller's job (CartService / OrderService). Product activity and stock are
also checked by the caller before a mutation is applied.

Rules:
  - a line is identified by (product_id, selected_options)
  - line quantity stays within [1, MAX_LINE_QUANTITY]
  - setting a quantity <= 0 removes the line
  - total_items / total_price are recomputed after every mutation
"""
import uuid
from datetime import datetime, timezone

from storefront.core.pricing import snapshot_of, subtotal_of
from storefront.models.cart import Cart, CartItem
from storefront.models.product import Product

MAX_LINE_QUANTITY = 99


def _clamp(quantity: int) -> int:
    return max(1, min(quantity, MAX_LINE_QUANTITY))


def _same_options(a: dict[str, str] | None, b: dict[str, str] | None) -> bool:
    return dict(a or {}) == dict(b or {})


def find_line(
    cart: Cart,
    product_id: uuid.UUID,
    options: dict[str, str] | None = None,
) -> CartItem | None:
    for line in cart.items:
        if line.product_id == product_id and _same_options(line.selected_options, options):
            return line
    return None


def recompute_totals(cart: Cart) -> None:
    cart.total_items = sum(line.quantity for line in cart.items)
    cart.total_price = subtotal_of(cart.items)
    cart.updated_at = datetime.now(timezone.utc)


def add_item(
    cart: Cart,
    product: Product,
    quantity: int = 1,
    options: dict[str, str] | None = None,
) -> CartItem:
    """
    Merge into the matching line or append a new one.

    A new line snapshots the product's current name/price/image; merging
    keeps the snapshot of the existing line.
    """
    line = find_line(cart, product.id, options)
    if line is not None:
        line.quantity = _clamp(line.quantity + quantity)
    else:
        snapshot = snapshot_of(product)
        line = CartItem(
            product_id=product.id,
            name=snapshot.name,
            price=snapshot.price,
            image=snapshot.image,
            quantity=_clamp(quantity),
            selected_options=dict(options or {}),
        )
        cart.items.append(line)

    recompute_totals(cart)
    return line


def remove_item(
    cart: Cart,
    product_id: uuid.UUID,
    options: dict[str, str] | None = None,
) -> bool:
    """Drop the matching line. Returns False when there was none."""
    line = find_line(cart, product_id, options)
    if line is not None:
        cart.items.remove(line)
    recompute_totals(cart)
    return line is not None


def update_quantity(
    cart: Cart,
    product_id: uuid.UUID,
    quantity: int,
    options: dict[str, str] | None = None,
) -> CartItem | None:
    """
    Set the quantity of the matching line.

    quantity <= 0 removes the line and returns None.
    """
    if quantity <= 0:
        remove_item(cart, product_id, options)
        return None

    line = find_line(cart, product_id, options)
    if line is not None:
        line.quantity = _clamp(quantity)
    recompute_totals(cart)
    return line


def clear(cart: Cart) -> None:
    cart.items.clear()
    recompute_totals(cart)
