from tests.utils import API, auth_headers


def test_cart_created_on_first_access(client, user_token):
    resp = client.get(f"{API}/cart", headers=auth_headers(user_token))
    assert resp.status_code == 200
    body = resp.json()
    assert body["items"] == []
    assert body["total_quantity"] == 0
    assert body["total_price"] == 0


def test_add_merges_quantities(client, user_token, make_product):
    product = make_product(price=10.0)
    line = {"product_id": product["id"], "variant_id": "TS-M-RED", "quantity": 2}

    resp = client.post(f"{API}/cart/add", json=line, headers=auth_headers(user_token))
    assert resp.status_code == 200
    assert resp.json()["message"] == "Item added to cart successfully"

    resp = client.post(f"{API}/cart/add", json=line, headers=auth_headers(user_token))
    cart = resp.json()["cart"]
    assert len(cart["items"]) == 1
    item = cart["items"][0]
    assert item["quantity"] == 4
    assert item["line_total"] == 40.0
    assert item["product"]["name"] == "T-Shirt"
    assert item["product"]["size"] == "M"
    assert cart["total_quantity"] == 4
    assert cart["total_price"] == 40.0


def test_add_rejects_more_than_stock(client, user_token, make_product, stock_of):
    product = make_product()  # stock 5
    line = {"product_id": product["id"], "variant_id": "TS-M-RED", "quantity": 4}
    client.post(f"{API}/cart/add", json=line, headers=auth_headers(user_token))

    resp = client.post(f"{API}/cart/add", json=line, headers=auth_headers(user_token))
    assert resp.status_code == 400
    assert resp.json() == {"message": "Insufficient stock"}

    # Adding to the cart never touches stock
    assert stock_of("TS-M-RED") == 5


def test_add_unknown_product_or_variant(client, user_token, make_product):
    product = make_product()

    resp = client.post(
        f"{API}/cart/add",
        json={"product_id": "00000000-0000-0000-0000-000000000000", "variant_id": "TS-M-RED"},
        headers=auth_headers(user_token),
    )
    assert resp.status_code == 404
    assert resp.json() == {"message": "Product not found"}

    resp = client.post(
        f"{API}/cart/add",
        json={"product_id": product["id"], "variant_id": "NOPE"},
        headers=auth_headers(user_token),
    )
    assert resp.status_code == 404
    assert resp.json() == {"message": "Product variant not found"}


def test_update_quantity(client, user_token, make_product):
    product = make_product()
    headers = auth_headers(user_token)
    client.post(
        f"{API}/cart/add",
        json={"product_id": product["id"], "variant_id": "TS-M-RED", "quantity": 1},
        headers=headers,
    )

    resp = client.put(
        f"{API}/cart/update",
        json={"product_id": product["id"], "variant_id": "TS-M-RED", "quantity": 3},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["cart"]["items"][0]["quantity"] == 3

    resp = client.put(
        f"{API}/cart/update",
        json={"product_id": product["id"], "variant_id": "TS-M-RED", "quantity": 6},
        headers=headers,
    )
    assert resp.status_code == 400

    resp = client.put(
        f"{API}/cart/update",
        json={"product_id": product["id"], "variant_id": "TS-M-RED", "quantity": 0},
        headers=headers,
    )
    assert resp.status_code == 400


def test_update_missing_line(client, user_token, make_product):
    product = make_product()
    headers = auth_headers(user_token)
    line = {"product_id": product["id"], "variant_id": "TS-M-RED", "quantity": 1}

    resp = client.put(f"{API}/cart/update", json=line, headers=headers)
    assert resp.status_code == 404
    assert resp.json() == {"message": "Cart not found"}

    client.get(f"{API}/cart", headers=headers)
    resp = client.put(f"{API}/cart/update", json=line, headers=headers)
    assert resp.status_code == 404
    assert resp.json() == {"message": "Item not found in cart"}


def test_remove_and_clear(client, user_token, make_product):
    product = make_product(
        variants=[
            {"sku": "A", "size": "S", "color": "Red", "stock": 3},
            {"sku": "B", "size": "M", "color": "Red", "stock": 3},
        ]
    )
    headers = auth_headers(user_token)
    for sku in ("A", "B"):
        client.post(
            f"{API}/cart/add",
            json={"product_id": product["id"], "variant_id": sku},
            headers=headers,
        )

    resp = client.delete(f"{API}/cart/remove/{product['id']}/A", headers=headers)
    assert resp.status_code == 200
    assert [i["variant_id"] for i in resp.json()["cart"]["items"]] == ["B"]

    resp = client.delete(f"{API}/cart/remove/{product['id']}/A", headers=headers)
    assert resp.status_code == 404

    resp = client.delete(f"{API}/cart/clear", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["cart"]["items"] == []


def test_deleted_product_stays_in_cart_without_details(client, user_token, make_product):
    product = make_product()
    headers = auth_headers(user_token)
    client.post(
        f"{API}/cart/add",
        json={"product_id": product["id"], "variant_id": "TS-M-RED", "quantity": 2},
        headers=headers,
    )
    client.delete(f"{API}/products/{product['id']}", headers=headers)

    cart = client.get(f"{API}/cart", headers=headers).json()
    assert cart["items"][0]["product"] is None
    assert cart["items"][0]["line_total"] == 0
    assert cart["total_quantity"] == 2
    assert cart["total_price"] == 0
