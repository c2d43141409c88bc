import pytest

from tests.utils import API, auth_headers

CHECKOUT = {
    "shipping_address": {"address": "1 Main St", "city": "Springfield", "zip_code": "11111"},
    "payment": {"method": "COD"},
}


@pytest.fixture
def fill_cart(client, user_token):
    def _fill(product_id, sku, quantity):
        resp = client.post(
            f"{API}/cart/add",
            json={"product_id": product_id, "variant_id": sku, "quantity": quantity},
            headers=auth_headers(user_token),
        )
        assert resp.status_code == 200, resp.text

    return _fill


@pytest.fixture
def place_order(client, user_token):
    def _place(payload=CHECKOUT):
        return client.post(f"{API}/orders/create", json=payload, headers=auth_headers(user_token))

    return _place


def test_checkout_computes_amount_and_takes_stock(
    client, user_token, make_product, fill_cart, place_order, stock_of
):
    product = make_product(price=10.0)  # stock 5
    fill_cart(product["id"], "TS-M-RED", 2)

    payload = {**CHECKOUT, "payment": {"method": "Credit Card", "amount": 999.0}}
    resp = place_order(payload)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Order created successfully"

    order = body["order"]
    assert order["status"] == "Pending"
    assert order["payment"]["method"] == "Credit Card"
    assert order["payment"]["amount"] == 20.0
    assert order["payment"]["transaction_id"].startswith("TXN_")
    assert order["total_amount"] == 20.0
    assert order["items"] == [
        {
            "product_id": product["id"],
            "variant_id": "TS-M-RED",
            "quantity": 2,
            "price": 10.0,
            "line_total": 20.0,
        }
    ]
    assert order["shipping_address"]["city"] == "Springfield"

    assert stock_of("TS-M-RED") == 3
    cart = client.get(f"{API}/cart", headers=auth_headers(user_token)).json()
    assert cart["items"] == []


def test_price_is_snapshotted(client, user_token, make_product, fill_cart, place_order):
    product = make_product(price=10.0)
    fill_cart(product["id"], "TS-M-RED", 1)
    order = place_order().json()["order"]

    client.put(
        f"{API}/products/{product['id']}",
        json={"price": 50.0},
        headers=auth_headers(user_token),
    )

    resp = client.get(f"{API}/orders/{order['id']}", headers=auth_headers(user_token))
    assert resp.json()["items"][0]["price"] == 10.0
    assert resp.json()["payment"]["amount"] == 10.0


def test_empty_cart(place_order):
    resp = place_order()
    assert resp.status_code == 400
    assert resp.json() == {"message": "Cart is empty"}


def test_insufficient_stock_leaves_everything_untouched(
    client, user_token, make_product, fill_cart, place_order, set_stock, stock_of
):
    product = make_product()
    fill_cart(product["id"], "TS-M-RED", 3)
    set_stock("TS-M-RED", 2)

    resp = place_order()
    assert resp.status_code == 400
    assert resp.json() == {"message": "Insufficient stock for T-Shirt"}

    assert stock_of("TS-M-RED") == 2
    cart = client.get(f"{API}/cart", headers=auth_headers(user_token)).json()
    assert cart["total_quantity"] == 3
    orders = client.get(f"{API}/orders/user-orders", headers=auth_headers(user_token)).json()
    assert orders["total"] == 0


def test_failing_line_rolls_back_earlier_lines(
    client, user_token, make_product, fill_cart, place_order, set_stock, stock_of
):
    product = make_product(
        variants=[
            {"sku": "OK", "size": "S", "color": "Red", "stock": 5},
            {"sku": "SHORT", "size": "M", "color": "Red", "stock": 5},
        ]
    )
    fill_cart(product["id"], "OK", 2)
    fill_cart(product["id"], "SHORT", 4)
    set_stock("SHORT", 1)

    resp = place_order()
    assert resp.status_code == 400

    assert stock_of("OK") == 5
    assert stock_of("SHORT") == 1
    orders = client.get(f"{API}/orders/user-orders", headers=auth_headers(user_token)).json()
    assert orders["total"] == 0


def test_deleted_product_in_cart(client, user_token, make_product, fill_cart, place_order):
    product = make_product()
    fill_cart(product["id"], "TS-M-RED", 1)
    client.delete(f"{API}/products/{product['id']}", headers=auth_headers(user_token))

    resp = place_order()
    assert resp.status_code == 404
    assert resp.json() == {"message": f"Product {product['id']} not found"}


def test_invalid_payment_method(place_order):
    resp = place_order({**CHECKOUT, "payment": {"method": "Bitcoin"}})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation error"


def test_user_orders_are_private(
    client, register, user_token, make_product, fill_cart, place_order
):
    product = make_product()
    fill_cart(product["id"], "TS-M-RED", 1)
    order = place_order().json()["order"]

    resp = client.get(f"{API}/orders/user-orders", headers=auth_headers(user_token))
    body = resp.json()
    assert body["total"] == 1
    assert body["orders"][0]["id"] == order["id"]

    resp = client.get(
        f"{API}/orders/user-orders",
        params={"status": "Delivered"},
        headers=auth_headers(user_token),
    )
    assert resp.json()["total"] == 0

    bob = register(email="bob@example.com", username="bob")
    resp = client.get(f"{API}/orders/{order['id']}", headers=auth_headers(bob["token"]))
    assert resp.status_code == 404
    resp = client.get(f"{API}/orders/user-orders", headers=auth_headers(bob["token"]))
    assert resp.json()["total"] == 0


# ---- Admin ----


def test_admin_routes_reject_customers(client, user_token):
    headers = auth_headers(user_token)
    assert client.get(f"{API}/orders/admin/orders", headers=headers).status_code == 403
    assert client.get(f"{API}/orders/stats/all", headers=headers).status_code == 403
    resp = client.put(
        f"{API}/orders/00000000-0000-0000-0000-000000000000/status",
        json={"status": "Shipped"},
        headers=headers,
    )
    assert resp.status_code == 403
    assert resp.json() == {"message": "Access denied"}


def test_status_flow_and_cancel_restores_once(
    client, admin_token, make_product, fill_cart, place_order, stock_of
):
    product = make_product()
    fill_cart(product["id"], "TS-M-RED", 2)
    order = place_order().json()["order"]
    assert stock_of("TS-M-RED") == 3
    url = f"{API}/orders/{order['id']}/status"
    headers = auth_headers(admin_token)

    resp = client.put(url, json={"status": "Processing"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["order"]["status"] == "Processing"

    # No going back
    resp = client.put(url, json={"status": "Pending"}, headers=headers)
    assert resp.status_code == 400

    resp = client.put(url, json={"status": "Cancelled"}, headers=headers)
    assert resp.status_code == 200
    assert stock_of("TS-M-RED") == 5

    # Cancelled is terminal; stock is not restored twice
    resp = client.put(url, json={"status": "Cancelled"}, headers=headers)
    assert resp.status_code == 200
    resp = client.put(url, json={"status": "Shipped"}, headers=headers)
    assert resp.status_code == 400
    assert stock_of("TS-M-RED") == 5


def test_unknown_status_rejected(client, admin_token, make_product, fill_cart, place_order):
    product = make_product()
    fill_cart(product["id"], "TS-M-RED", 1)
    order = place_order().json()["order"]

    resp = client.put(
        f"{API}/orders/{order['id']}/status",
        json={"status": "Lost"},
        headers=auth_headers(admin_token),
    )
    assert resp.status_code == 400

    resp = client.put(
        f"{API}/orders/00000000-0000-0000-0000-000000000000/status",
        json={"status": "Shipped"},
        headers=auth_headers(admin_token),
    )
    assert resp.status_code == 404


def test_admin_list_and_stats(client, admin_token, make_product, fill_cart, place_order):
    product = make_product(price=10.0, variants=[
        {"sku": "S1", "size": "S", "color": "Red", "stock": 10},
    ])
    fill_cart(product["id"], "S1", 1)
    first = place_order().json()["order"]
    fill_cart(product["id"], "S1", 3)
    second = place_order().json()["order"]

    headers = auth_headers(admin_token)
    client.put(
        f"{API}/orders/{first['id']}/status",
        json={"status": "Cancelled"},
        headers=headers,
    )

    resp = client.get(f"{API}/orders/admin/orders", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_orders"] == 2
    assert body["total_revenue"] == 40.0

    resp = client.get(
        f"{API}/orders/admin/orders",
        params={"status": "Pending"},
        headers=headers,
    )
    body = resp.json()
    assert [o["id"] for o in body["orders"]] == [second["id"]]
    assert body["total_revenue"] == 30.0

    resp = client.get(
        f"{API}/orders/admin/orders",
        params={"sort_by": "payment_amount", "sort_order": "asc"},
        headers=headers,
    )
    assert [o["id"] for o in resp.json()["orders"]] == [first["id"], second["id"]]

    resp = client.get(f"{API}/orders/stats/all", headers=headers)
    assert resp.status_code == 200
    stats = resp.json()
    assert stats["statistics"] == {
        "total_orders": 2,
        "total_revenue": 30.0,
        "average_order_value": 30.0,
    }
    assert sorted((s["status"], s["count"]) for s in stats["status_distribution"]) == [
        ("Cancelled", 1),
        ("Pending", 1),
    ]
