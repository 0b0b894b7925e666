"""HTTP tests for /api/cart."""
import pytest

from conftest import bearer


@pytest.fixture
def headers(user_token) -> dict[str, str]:
    return bearer(user_token)


def _add(client, headers, course_id):
    return client.post("/api/cart", json={"courseId": course_id}, headers=headers)


def test_cart_requires_token(client):
    for method, url in [
        ("GET", "/api/cart"),
        ("GET", "/api/cart/count"),
        ("POST", "/api/cart"),
        ("DELETE", "/api/cart/clear"),
    ]:
        resp = client.request(method, url)
        assert resp.status_code == 401, url
        assert resp.json()["message"] == "Access token required"


def test_add_twice_conflicts(client, headers):
    first = _add(client, headers, 5)
    assert first.status_code == 201
    assert first.json()["message"] == "Course added to cart successfully"
    item = first.json()["item"]
    assert item["courseId"] == 5
    assert item["bought"] is False
    assert {"id", "userId", "addedAt"} <= item.keys()

    second = _add(client, headers, 5)
    assert second.status_code == 409
    assert second.json() == {"success": False, "message": "Course already in cart"}


def test_add_after_checkout_is_already_bought(client, headers):
    _add(client, headers, 5)
    assert client.delete("/api/cart/clear?bought=true", headers=headers).status_code == 200

    resp = _add(client, headers, 5)

    assert resp.status_code == 409
    assert resp.json()["message"] == "You already bought this course"


@pytest.mark.parametrize("body", [{}, {"courseId": 0}, {"courseId": -3}, {"courseId": "abc"}])
def test_add_validation(client, headers, body):
    resp = client.post("/api/cart", json=body, headers=headers)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation error"


def test_list_and_count(client, headers):
    _add(client, headers, 1)
    _add(client, headers, 2)

    listed = client.get("/api/cart", headers=headers).json()
    assert listed["message"] == "Cart retrieved successfully"
    assert [i["courseId"] for i in listed["cart"]] == [2, 1]

    count = client.get("/api/cart/count", headers=headers).json()
    assert count["count"] == 2


def test_checkout_moves_items_to_history(client, headers):
    _add(client, headers, 1)
    _add(client, headers, 2)

    resp = client.delete("/api/cart/clear?bought=true", headers=headers)
    assert resp.json() == {"success": True, "message": "Checkout completed successfully"}

    assert client.get("/api/cart", headers=headers).json()["cart"] == []
    history = client.get("/api/cart?bought=true", headers=headers).json()["cart"]
    assert sorted(i["courseId"] for i in history) == [1, 2]
    assert all(i["bought"] for i in history)
    assert client.get("/api/cart/count", headers=headers).json()["count"] == 0


def test_clear_abandons_cart(client, headers):
    _add(client, headers, 1)

    resp = client.delete("/api/cart/clear", headers=headers)

    assert resp.json()["message"] == "Cart cleared successfully"
    assert client.get("/api/cart/count", headers=headers).json()["count"] == 0
    assert client.get("/api/cart?bought=true", headers=headers).json()["cart"] == []


@pytest.mark.parametrize("query", ["", "?bought=true"])
def test_clear_empty_cart(client, headers, query):
    resp = client.delete(f"/api/cart/clear{query}", headers=headers)

    assert resp.status_code == 404
    assert resp.json()["message"] == "Cart is already empty"


def test_remove_item(client, headers):
    _add(client, headers, 5)

    resp = client.delete("/api/cart/items/5", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Course removed from cart successfully"

    resp = client.delete("/api/cart/items/5", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Course not found in cart"


def test_purchased_item_cannot_be_removed(client, headers):
    _add(client, headers, 5)
    client.delete("/api/cart/clear?bought=true", headers=headers)

    resp = client.delete("/api/cart/items/5", headers=headers)

    assert resp.status_code == 404


def test_item_status_and_recent(client, headers):
    for course in (1, 2, 3):
        _add(client, headers, course)

    status = client.get("/api/cart/items/2", headers=headers).json()
    assert status["isInCart"] is True
    assert client.get("/api/cart/items/9", headers=headers).json()["isInCart"] is False

    recent = client.get("/api/cart/recent?limit=2", headers=headers).json()["cart"]
    assert [i["courseId"] for i in recent] == [3, 2]


def test_carts_are_per_user(client, headers, admin_token):
    _add(client, headers, 5)

    admin_headers = bearer(admin_token)
    assert client.get("/api/cart", headers=admin_headers).json()["cart"] == []
    assert _add(client, admin_headers, 5).status_code == 201


@pytest.mark.parametrize(
    "method,url,body",
    [
        ("POST", "/api/cart", {"courseId": 10**20}),
        ("POST", "/api/cart", {"courseId": 2_147_483_648}),
        ("GET", "/api/cart/items/100000000000000000000", None),
        ("DELETE", "/api/cart/items/100000000000000000000", None),
    ],
)
def test_oversized_course_id_is_rejected(client, headers, method, url, body):
    resp = client.request(method, url, json=body, headers=headers)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation error"


def test_largest_course_id_is_accepted(client, headers):
    assert _add(client, headers, 2_147_483_647).status_code == 201
