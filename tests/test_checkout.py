import re

from sqlmodel import select

from storefront.models.cart import Cart
from storefront.models.order import Order
from storefront.models.product import Product


def _checkout(client, headers, shipping_address, **extra):
    payload = {
        "shipping_address": shipping_address,
        "payment_method": "credit_card",
        **extra,
    }
    return client.post("/api/orders", json=payload, headers=headers)


def test_checkout_with_empty_cart_is_rejected(
    client, customer, auth_headers, shipping_address
):
    resp = _checkout(client, auth_headers(customer), shipping_address)

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Cart is empty"}


def test_checkout_computes_charges_and_freezes_lines(
    client, session, customer, auth_headers, make_product, add_to_cart, shipping_address
):
    mouse = make_product(name="Mouse", price=25.0, inventory_quantity=10)
    keyboard = make_product(name="Keyboard", price=50.0, inventory_quantity=5)
    add_to_cart(customer, mouse, 2)
    add_to_cart(customer, keyboard, 1)

    resp = _checkout(client, auth_headers(customer), shipping_address, notes="Leave at door")

    assert resp.status_code == 201
    order = resp.json()["data"]
    assert re.fullmatch(r"ORD-\d{8}-[0-9A-F]{8}", order["order_number"])
    assert order["status"] == "pending"
    assert order["items_price"] == 100.0
    assert order["tax_price"] == 8.0
    assert order["shipping_price"] == 0.0
    assert order["total_price"] == 108.0
    assert order["notes"] == "Leave at door"
    assert order["billing_address"] == shipping_address
    assert sorted((i["name"], i["quantity"]) for i in order["items"]) == [
        ("Keyboard", 1),
        ("Mouse", 2),
    ]


def test_checkout_below_threshold_pays_shipping(
    client, customer, auth_headers, make_product, add_to_cart, shipping_address
):
    add_to_cart(customer, make_product(price=50.0), 1)

    order = _checkout(client, auth_headers(customer), shipping_address).json()["data"]

    assert order["shipping_price"] == 9.99
    assert order["total_price"] == 63.99


def test_checkout_empties_cart_and_decrements_stock(
    client, session, customer, auth_headers, make_product, add_to_cart, shipping_address
):
    product = make_product(inventory_quantity=10)
    add_to_cart(customer, product, 3)

    resp = _checkout(client, auth_headers(customer), shipping_address)
    assert resp.status_code == 201

    session.expire_all()
    assert session.get(Product, product.id).inventory_quantity == 7
    cart = session.exec(select(Cart).where(Cart.user_id == customer.id)).one()
    assert cart.items == []
    assert cart.total_items == 0

    cart_resp = client.get("/api/cart", headers=auth_headers(customer))
    assert cart_resp.json()["data"]["is_empty"] is True


def test_checkout_insufficient_stock_writes_nothing(
    client, session, customer, auth_headers, make_product, add_to_cart, shipping_address
):
    product = make_product(name="Headphones", inventory_quantity=5)
    add_to_cart(customer, product, 4)

    # Stock drops after the item was carted
    product.inventory_quantity = 2
    session.add(product)
    session.commit()

    resp = _checkout(client, auth_headers(customer), shipping_address)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Insufficient stock for Headphones"

    session.expire_all()
    assert session.exec(select(Order)).all() == []
    assert session.get(Product, product.id).inventory_quantity == 2
    cart = session.exec(select(Cart).where(Cart.user_id == customer.id)).one()
    assert cart.total_items == 4


def test_checkout_rejects_deactivated_product(
    client, session, customer, auth_headers, make_product, add_to_cart, shipping_address
):
    product = make_product(name="Old Model")
    add_to_cart(customer, product, 1)
    product.is_active = False
    session.add(product)
    session.commit()

    resp = _checkout(client, auth_headers(customer), shipping_address)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Insufficient stock for Old Model"


def test_order_keeps_price_at_add_time(
    client, session, customer, auth_headers, make_product, add_to_cart, shipping_address
):
    product = make_product(price=20.0)
    add_to_cart(customer, product, 1)

    product.price = 999.0
    session.add(product)
    session.commit()

    order = _checkout(client, auth_headers(customer), shipping_address).json()["data"]

    assert order["items"][0]["price"] == 20.0
    assert order["items_price"] == 20.0


def test_checkout_publishes_stock_update_to_admins(
    client, hub, customer, auth_headers, make_product, add_to_cart, shipping_address
):
    product = make_product()
    add_to_cart(customer, product, 1)

    order = _checkout(client, auth_headers(customer), shipping_address).json()["data"]

    assert hub.published == [
        (
            "admin",
            "stock-update",
            {
                "message": "Product stock updated after order",
                "order_id": order["id"],
                "product_ids": [str(product.id)],
            },
        )
    ]


def test_incomplete_address_fails_validation(
    client, customer, auth_headers, make_product, add_to_cart, shipping_address
):
    add_to_cart(customer, make_product(), 1)
    del shipping_address["city"]

    resp = _checkout(client, auth_headers(customer), shipping_address)

    assert resp.status_code == 400
    assert resp.json()["message"] == "shipping_address.city: Field required"


def test_unknown_payment_method_fails_validation(
    client, customer, auth_headers, make_product, add_to_cart, shipping_address
):
    add_to_cart(customer, make_product(), 1)

    resp = client.post(
        "/api/orders",
        json={"shipping_address": shipping_address, "payment_method": "cash"},
        headers=auth_headers(customer),
    )

    assert resp.status_code == 400
    assert resp.json()["message"].startswith("payment_method:")
