import uuid

from storefront.models.product import Product


def test_list_my_orders_is_paginated_and_scoped(
    client, customer, make_user, auth_headers, make_product, place_order
):
    other = make_user()
    product = make_product(inventory_quantity=50)
    for _ in range(3):
        place_order(customer, product)
    place_order(other, product)

    resp = client.get(
        "/api/orders", params={"page": 1, "limit": 2}, headers=auth_headers(customer)
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 2
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    assert {o["user_id"] for o in body["data"]} == {str(customer.id)}


def test_get_order_owner_admin_and_stranger(
    client, customer, admin, make_user, auth_headers, make_product, place_order
):
    order = place_order(customer, make_product())
    stranger = make_user()
    url = f"/api/orders/{order['id']}"

    assert client.get(url, headers=auth_headers(customer)).status_code == 200
    assert client.get(url, headers=auth_headers(admin)).status_code == 200

    resp = client.get(url, headers=auth_headers(stranger))
    assert resp.status_code == 403
    assert resp.json()["message"] == "Not authorized to access this order"


def test_get_missing_order_is_404(client, customer, auth_headers):
    resp = client.get(f"/api/orders/{uuid.uuid4()}", headers=auth_headers(customer))

    assert resp.status_code == 404
    assert resp.json()["message"] == "Order not found"


def test_cancel_restores_inventory(
    client, session, customer, auth_headers, make_product, place_order
):
    product = make_product(inventory_quantity=10)
    order = place_order(customer, product, quantity=4)

    session.expire_all()
    assert session.get(Product, product.id).inventory_quantity == 6

    resp = client.put(f"/api/orders/{order['id']}/cancel", headers=auth_headers(customer))

    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "cancelled"
    session.expire_all()
    assert session.get(Product, product.id).inventory_quantity == 10


def test_cancel_by_someone_else_is_forbidden(
    client, customer, admin, auth_headers, make_product, place_order
):
    order = place_order(customer, make_product())

    resp = client.put(f"/api/orders/{order['id']}/cancel", headers=auth_headers(admin))

    assert resp.status_code == 403
    assert resp.json()["message"] == "Not authorized to cancel this order"


def test_cancel_after_shipping_is_rejected(
    client, customer, admin, auth_headers, make_product, place_order
):
    order = place_order(customer, make_product())
    client.put(
        f"/api/orders/{order['id']}",
        json={"status": "shipped", "tracking_number": "1Z999"},
        headers=auth_headers(admin),
    )

    resp = client.put(f"/api/orders/{order['id']}/cancel", headers=auth_headers(customer))

    assert resp.status_code == 400
    assert resp.json()["message"] == "Order cannot be cancelled at this stage"


def test_admin_status_update_notifies_owner(
    client, hub, customer, admin, auth_headers, make_product, place_order
):
    order = place_order(customer, make_product())
    hub.published.clear()

    resp = client.put(
        f"/api/orders/{order['id']}",
        json={"status": "processing", "notes": "Packed"},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "processing"
    assert data["notes"] == "Packed"
    assert hub.published == [
        (
            str(customer.id),
            "order-notification",
            {
                "order_id": order["id"],
                "status": "processing",
                "message": f"Order {order['order_number']} status updated to processing",
            },
        )
    ]


def test_admin_may_set_any_status(
    client, customer, admin, auth_headers, make_product, place_order
):
    order = place_order(customer, make_product())
    url = f"/api/orders/{order['id']}"

    for status in ("delivered", "pending", "cancelled"):
        resp = client.put(url, json={"status": status}, headers=auth_headers(admin))
        assert resp.json()["data"]["status"] == status


def test_tracking_only_update_does_not_notify(
    client, hub, customer, admin, auth_headers, make_product, place_order
):
    order = place_order(customer, make_product())
    hub.published.clear()

    resp = client.put(
        f"/api/orders/{order['id']}",
        json={"tracking_number": "TRK-1"},
        headers=auth_headers(admin),
    )

    assert resp.json()["data"]["tracking_number"] == "TRK-1"
    assert hub.published == []


def test_status_update_requires_admin(
    client, customer, auth_headers, make_product, place_order
):
    order = place_order(customer, make_product())

    resp = client.put(
        f"/api/orders/{order['id']}",
        json={"status": "delivered"},
        headers=auth_headers(customer),
    )

    assert resp.status_code == 403
    assert resp.json()["message"] == "User role user is not authorized to access this route"


def test_admin_lists_all_orders_with_status_filter(
    client, customer, make_user, admin, auth_headers, make_product, place_order
):
    product = make_product(inventory_quantity=20)
    first = place_order(customer, product)
    place_order(make_user(), product)
    client.put(
        f"/api/orders/{first['id']}",
        json={"status": "delivered"},
        headers=auth_headers(admin),
    )

    everything = client.get("/api/orders/admin/all", headers=auth_headers(admin)).json()
    delivered = client.get(
        "/api/orders/admin/all",
        params={"status": "delivered"},
        headers=auth_headers(admin),
    ).json()

    assert everything["pagination"]["total"] == 2
    assert [o["id"] for o in delivered["data"]] == [first["id"]]


def test_admin_listing_requires_admin(client, customer, auth_headers):
    resp = client.get("/api/orders/admin/all", headers=auth_headers(customer))

    assert resp.status_code == 403
