import pytest
from pydantic import ValidationError

from storefront.core.pricing import (
    SHIPPING_FEE,
    PriceSnapshot,
    compute_charges,
    snapshot_of,
    subtotal_of,
)
from storefront.models.product import Product


class Line:
    def __init__(self, price, quantity):
        self.price = price
        self.quantity = quantity


def test_free_shipping_from_one_hundred():
    charges = compute_charges(100.0)

    assert charges.items_price == 100.0
    assert charges.tax_price == 8.0
    assert charges.shipping_price == 0.0
    assert charges.total_price == 108.0


def test_flat_shipping_below_threshold():
    charges = compute_charges(50.0)

    assert charges.tax_price == 4.0
    assert charges.shipping_price == SHIPPING_FEE
    assert charges.total_price == 63.99


def test_shipping_charged_just_under_threshold():
    assert compute_charges(99.99).shipping_price == SHIPPING_FEE


def test_total_is_sum_of_parts():
    charges = compute_charges(37.45)
    assert charges.total_price == round(
        charges.items_price + charges.tax_price + charges.shipping_price, 2
    )


def test_subtotal_sums_price_times_quantity():
    lines = [Line(19.99, 2), Line(5.5, 3)]
    assert subtotal_of(lines) == 56.48


def test_subtotal_of_nothing_is_zero():
    assert subtotal_of([]) == 0


def test_snapshot_takes_first_image():
    product = Product(
        name="Desk Lamp",
        slug="desk-lamp",
        description="Lamp",
        price=30.0,
        category="home",
        brand="Lumo",
        images=[
            {"url": "https://img.example.com/lamp-1.png", "alt": ""},
            {"url": "https://img.example.com/lamp-2.png", "alt": ""},
        ],
    )

    snapshot = snapshot_of(product)

    assert snapshot == PriceSnapshot(
        name="Desk Lamp", price=30.0, image="https://img.example.com/lamp-1.png"
    )


def test_snapshot_without_images_has_empty_image():
    product = Product(
        name="Gift Card",
        slug="gift-card",
        description="Card",
        price=10.0,
        category="other",
        brand="Store",
        images=[],
    )
    assert snapshot_of(product).image == ""


def test_snapshot_is_immutable():
    snapshot = PriceSnapshot(name="Mug", price=8.0)
    with pytest.raises(ValidationError):
        snapshot.price = 1.0
