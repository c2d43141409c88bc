import pytest

from tests.utils import API, auth_headers


@pytest.fixture
def make_category(client, user_token):
    def _make(name, parent_id=None, **extra):
        resp = client.post(
            f"{API}/categories",
            json={"name": name, "parent_id": parent_id, **extra},
            headers=auth_headers(user_token),
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


def test_create_requires_token(client):
    resp = client.post(f"{API}/categories", json={"name": "Shoes"})
    assert resp.status_code == 401


def test_create_generates_slug(make_category):
    body = make_category("Running Shoes & Boots")
    assert body["slug"] == "running-shoes-boots"
    assert body["is_active"] is True
    assert body["parent_id"] is None


def test_duplicate_name_rejected(client, user_token, make_category):
    make_category("Shoes")
    resp = client.post(
        f"{API}/categories",
        json={"name": "Shoes"},
        headers=auth_headers(user_token),
    )
    assert resp.status_code == 400


def test_child_reports_parent_name(client, make_category):
    parent = make_category("Clothing")
    child = make_category("Shirts", parent_id=parent["id"])
    assert child["parent_name"] == "Clothing"

    resp = client.get(f"{API}/categories/{child['id']}")
    assert resp.status_code == 200
    assert resp.json()["parent_id"] == parent["id"]


def test_unknown_parent(client, user_token):
    resp = client.post(
        f"{API}/categories",
        json={"name": "Orphan", "parent_id": "00000000-0000-0000-0000-000000000000"},
        headers=auth_headers(user_token),
    )
    assert resp.status_code == 404


def test_list_filters_and_pagination(client, make_category):
    parent = make_category("Clothing")
    make_category("Shirts", parent_id=parent["id"])
    make_category("Trousers", parent_id=parent["id"], description="long legs")
    make_category("Toys")

    resp = client.get(f"{API}/categories", params={"parent_id": parent["id"]})
    body = resp.json()
    assert body["total"] == 2
    assert [c["name"] for c in body["categories"]] == ["Shirts", "Trousers"]

    resp = client.get(f"{API}/categories", params={"search": "legs"})
    assert [c["name"] for c in resp.json()["categories"]] == ["Trousers"]

    resp = client.get(f"{API}/categories", params={"page": 2, "limit": 3})
    body = resp.json()
    assert body["total"] == 4
    assert body["total_pages"] == 2
    assert body["current_page"] == 2
    assert len(body["categories"]) == 1


def test_tree(client, make_category):
    clothing = make_category("Clothing")
    shirts = make_category("Shirts", parent_id=clothing["id"])
    make_category("Polo", parent_id=shirts["id"])
    make_category("Books")

    resp = client.get(f"{API}/categories/tree")
    assert resp.status_code == 200
    tree = resp.json()
    assert [n["name"] for n in tree] == ["Books", "Clothing"]
    clothing_node = tree[1]
    assert [n["name"] for n in clothing_node["children"]] == ["Shirts"]
    assert [n["name"] for n in clothing_node["children"][0]["children"]] == ["Polo"]


def test_move_under_descendant_rejected(client, user_token, make_category):
    a = make_category("A")
    b = make_category("B", parent_id=a["id"])
    c = make_category("C", parent_id=b["id"])

    resp = client.put(
        f"{API}/categories/{a['id']}",
        json={"parent_id": c["id"]},
        headers=auth_headers(user_token),
    )
    assert resp.status_code == 400

    resp = client.put(
        f"{API}/categories/{a['id']}",
        json={"parent_id": a["id"]},
        headers=auth_headers(user_token),
    )
    assert resp.status_code == 400


def test_move_to_root(client, user_token, make_category):
    a = make_category("A")
    b = make_category("B", parent_id=a["id"])

    resp = client.put(
        f"{API}/categories/{b['id']}",
        json={"parent_id": None, "is_active": False},
        headers=auth_headers(user_token),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["parent_id"] is None
    assert body["is_active"] is False


def test_delete_with_children_rejected(client, user_token, make_category):
    parent = make_category("Clothing")
    child = make_category("Shirts", parent_id=parent["id"])

    resp = client.delete(f"{API}/categories/{parent['id']}", headers=auth_headers(user_token))
    assert resp.status_code == 400
    assert resp.json() == {"message": "Cannot delete category with subcategories"}

    resp = client.delete(f"{API}/categories/{child['id']}", headers=auth_headers(user_token))
    assert resp.status_code == 200
    resp = client.delete(f"{API}/categories/{parent['id']}", headers=auth_headers(user_token))
    assert resp.status_code == 200

    resp = client.get(f"{API}/categories/{parent['id']}")
    assert resp.status_code == 404
