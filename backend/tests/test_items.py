import uuid
from decimal import Decimal

from fastapi.testclient import TestClient

from app.db import SessionLocal, init_db
from app.main import app
from app.services.cart_service import CartService
from app.services.item_service import sanitize_listing_params
from helpers import auth, cart_quantity, make_account, make_item, stock_of

client = TestClient(app)

STATE = {}


def setup_module(module):
    init_db(reset=True)
    STATE["seller_id"], STATE["token"] = make_account("seller")
    STATE["other_id"], STATE["other_token"] = make_account("otherseller")


def _create(name, price, quantity=3, category="books", token=None):
    res = client.post(
        "/items",
        json={
            "name": name,
            "description": f"{name} for sale",
            "price": price,
            "quantity": quantity,
            "category": category,
        },
        headers=auth(token or STATE["token"]),
    )
    assert res.status_code == 201, res.text
    return res.json()["item_id"]


def test_create_and_get_item():
    item_id = _create("Novel", "12.50")
    res = client.get(f"/items/{item_id}")
    assert res.status_code == 200
    item = res.json()["item"]
    assert item["name"] == "Novel"
    assert item["seller"] == "seller"
    assert item["category"] == "books"
    assert item["quantity"] == 3
    assert item["price"] == "12.50"


def test_create_requires_auth_and_known_category():
    res = client.post(
        "/items",
        json={"name": "x", "description": "y", "price": "1", "quantity": 1, "category": "books"},
    )
    assert res.status_code in (401, 403)

    res = client.post(
        "/items",
        json={"name": "x", "description": "y", "price": "1", "quantity": 1, "category": "cars"},
        headers=auth(STATE["token"]),
    )
    assert res.status_code == 400
    assert res.json()["detail"][0]["param"] == "category"


def test_create_rejects_negative_price_and_zero_quantity():
    base = {"name": "x", "description": "y", "category": "books"}
    res = client.post("/items", json={**base, "price": "-1", "quantity": 1}, headers=auth(STATE["token"]))
    assert res.status_code == 400
    res = client.post("/items", json={**base, "price": "1", "quantity": 0}, headers=auth(STATE["token"]))
    assert res.status_code == 400


def test_get_unknown_or_malformed_item_is_404():
    assert client.get(f"/items/{uuid.uuid4()}").status_code == 404
    assert client.get("/items/not-a-uuid").status_code == 404


def test_list_items_filters_orders_and_sanitizes():
    _create("Cheap toy", "1.00", category="toys")
    _create("Pricey toy", "99.00", category="toys")
    _create("Mid toy", "10.00", category="toys")

    res = client.get("/items", params={"c": "toys", "p": "low"})
    assert res.status_code == 200
    prices = [Decimal(it["price"]) for it in res.json()["items"]]
    assert prices == sorted(prices)
    assert len(prices) == 3

    res = client.get("/items", params={"c": "toys", "p": "high"})
    prices = [Decimal(it["price"]) for it in res.json()["items"]]
    assert prices == sorted(prices, reverse=True)

    # garbage parameters fall back to defaults rather than failing
    res = client.get("/items", params={"c": "spaceships", "p": "weird", "o": "-3", "l": "5000"})
    assert res.status_code == 200
    assert len(res.json()["items"]) >= 4

    res = client.get("/items", params={"o": "1000"})
    assert res.json()["items"] == []


def test_list_items_huge_offset_falls_back_to_start():
    _create("Spinning top", "3.00", category="toys")
    first_page = client.get("/items").json()["items"]
    assert first_page

    for offset in ("1e30", "99999999999999999999", "2.5"):
        res = client.get("/items", params={"o": offset})
        assert res.status_code == 200
        assert res.json()["items"] == first_page


def test_sanitize_listing_params_defaults():
    assert sanitize_listing_params() == {"p": "relevent", "c": "all", "o": 0, "l": 20}
    params = sanitize_listing_params(p="high", c="toys", o=" 40 ", l="50")
    assert params == {"p": "high", "c": "toys", "o": 40, "l": 50}
    assert sanitize_listing_params(o=str(2**63))["o"] == 0
    assert sanitize_listing_params(l="1e1")["l"] == 20


def test_update_item_owner_only():
    item_id = _create("Lamp", "20.00", category="decorations")

    res = client.put(f"/items/{item_id}", json={"price": "25.00"}, headers=auth(STATE["other_token"]))
    assert res.status_code == 403

    res = client.put(f"/items/{item_id}", json={"price": "25.00", "name": "Desk lamp"}, headers=auth(STATE["token"]))
    assert res.status_code == 200
    item = client.get(f"/items/{item_id}").json()["item"]
    assert item["price"] == "25.00"
    assert item["name"] == "Desk lamp"

    res = client.put(f"/items/{uuid.uuid4()}", json={"price": "1"}, headers=auth(STATE["token"]))
    assert res.status_code == 403

    res = client.put(f"/items/{item_id}", json={"category": "cars"}, headers=auth(STATE["token"]))
    assert res.status_code == 400


def test_lowering_stock_caps_cart_entries():
    item_id = make_item(STATE["seller_id"], name="Mug", quantity=10, category="office")
    db = SessionLocal()
    try:
        assert CartService(db).add_item(STATE["other_id"], item_id, 8) == 8
    finally:
        db.close()

    res = client.put(f"/items/{item_id}", json={"quantity": 3}, headers=auth(STATE["token"]))
    assert res.status_code == 200
    assert stock_of(item_id) == 3
    assert cart_quantity(STATE["other_id"], item_id) == 3

    # raising stock again leaves the cart alone
    client.put(f"/items/{item_id}", json={"quantity": 20}, headers=auth(STATE["token"]))
    assert cart_quantity(STATE["other_id"], item_id) == 3

    # zero stock removes the entry
    res = client.put(f"/items/{item_id}", json={"quantity": 0}, headers=auth(STATE["token"]))
    assert res.status_code == 200
    assert cart_quantity(STATE["other_id"], item_id) is None


def test_delete_item_owner_only_and_clears_carts():
    item_id = make_item(STATE["seller_id"], name="Scarf", quantity=2, category="clothing")
    db = SessionLocal()
    try:
        CartService(db).add_item(STATE["other_id"], item_id, 1)
    finally:
        db.close()

    assert client.delete(f"/items/{item_id}", headers=auth(STATE["other_token"])).status_code == 403
    assert client.delete(f"/items/{item_id}", headers=auth(STATE["token"])).status_code == 200
    assert client.get(f"/items/{item_id}").status_code == 404
    assert cart_quantity(STATE["other_id"], item_id) is None
