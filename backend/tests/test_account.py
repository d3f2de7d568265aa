from fastapi.testclient import TestClient

from app.db import SessionLocal, init_db
from app.main import app
from app.models.account import Account
from app.models.cart import Cart
from app.models.cart_entry import CartEntry
from app.models.item import Item
from helpers import STRONG_PASSWORD, auth, make_account, make_item
from app.services.cart_service import CartService

client = TestClient(app)


def setup_module(module):
    init_db(reset=True)


def test_register_creates_account_and_cart():
    res = client.post(
        "/account",
        json={"username": "alice", "email": "alice@example.com", "password": STRONG_PASSWORD},
    )
    assert res.status_code == 201
    assert res.json()["token"]

    db = SessionLocal()
    try:
        acct = db.query(Account).filter(Account.username == "alice").first()
        assert acct is not None
        assert acct.hashed_password != STRONG_PASSWORD
        assert db.query(Cart).filter(Cart.owner_id == acct.id).count() == 1
    finally:
        db.close()


def test_register_rejects_duplicates():
    res = client.post(
        "/account",
        json={"username": "alice", "email": "other@example.com", "password": STRONG_PASSWORD},
    )
    assert res.status_code == 400
    assert res.json()["detail"][0]["message"] == "Username is already in use"

    res = client.post(
        "/account",
        json={"username": "alice2", "email": "alice@example.com", "password": STRONG_PASSWORD},
    )
    assert res.status_code == 400
    assert res.json()["detail"][0]["message"] == "Email is already in use"


def test_register_rejects_weak_password_and_bad_email():
    res = client.post(
        "/account",
        json={"username": "weak", "email": "weak@example.com", "password": "password"},
    )
    assert res.status_code == 400
    assert "errors" in res.json()

    res = client.post(
        "/account",
        json={"username": "bademail", "email": "not-an-email", "password": STRONG_PASSWORD},
    )
    assert res.status_code == 400


def test_register_rejects_long_username():
    res = client.post(
        "/account",
        json={"username": "x" * 21, "email": "long@example.com", "password": STRONG_PASSWORD},
    )
    assert res.status_code == 400


def test_login_with_username_or_email():
    res = client.post("/login", json={"username": "alice", "password": STRONG_PASSWORD})
    assert res.status_code == 200
    token = res.json()["token"]
    assert client.get("/cart", headers=auth(token)).status_code == 200

    res = client.post("/login", json={"email": "alice@example.com", "password": STRONG_PASSWORD})
    assert res.status_code == 200


def test_login_rejects_bad_password():
    res = client.post("/login", json={"username": "alice", "password": "Wrong1234"})
    assert res.status_code == 400
    assert res.json()["detail"] == "Login or password are incorrect"

    res = client.post("/login", json={"username": "nobody", "password": STRONG_PASSWORD})
    assert res.status_code == 400


def test_cart_requires_valid_token():
    assert client.get("/cart").status_code in (401, 403)
    assert client.get("/cart", headers=auth("garbage")).status_code == 401


def test_public_profile_lists_items():
    seller_id, _ = make_account("shopkeep")
    make_item(seller_id, name="Chess set", price="15.00", quantity=2, category="games")

    res = client.get("/account/shopkeep")
    assert res.status_code == 200
    body = res.json()
    assert body["user"]["username"] == "shopkeep"
    assert "email" not in body["user"]
    assert [it["name"] for it in body["items"]] == ["Chess set"]
    assert body["items"][0]["price"] == "15.00"

    assert client.get("/account/ghost").status_code == 404


def test_update_profile_owner_only():
    _, token = make_account("bob")
    _, other_token = make_account("mallory")

    res = client.put("/account/bob", json={"first_name": "Bob"}, headers=auth(token))
    assert res.status_code == 200
    assert client.get("/account/bob").json()["user"]["first_name"] == "Bob"

    res = client.put("/account/bob", json={"first_name": "Eve"}, headers=auth(other_token))
    assert res.status_code == 403

    res = client.put("/account/bob", json={}, headers=auth(token))
    assert res.status_code == 400


def test_update_password_then_login():
    _, token = make_account("carol")
    res = client.put(
        "/account/carol", json={"new_password": "N3wPassword"}, headers=auth(token)
    )
    assert res.status_code == 200
    assert client.post("/login", json={"username": "carol", "password": "N3wPassword"}).status_code == 200
    assert client.post("/login", json={"username": "carol", "password": STRONG_PASSWORD}).status_code == 400


def test_update_email_must_be_unique():
    _, token = make_account("dave")
    res = client.put(
        "/account/dave", json={"email": "alice@example.com"}, headers=auth(token)
    )
    assert res.status_code == 400


def test_delete_account_cascades():
    seller_id, token = make_account("leaving")
    buyer_id, _ = make_account("stayer")
    item_id = make_item(seller_id, quantity=4)

    db = SessionLocal()
    try:
        CartService(db).add_item(seller_id, item_id, 1)
        CartService(db).add_item(buyer_id, item_id, 2)
    finally:
        db.close()

    _, other_token = make_account("intruder")
    assert client.delete("/account/leaving", headers=auth(other_token)).status_code == 403

    res = client.delete("/account/leaving", headers=auth(token))
    assert res.status_code == 200

    db = SessionLocal()
    try:
        assert db.get(Account, seller_id) is None
        assert db.query(Cart).filter(Cart.owner_id == seller_id).count() == 0
        assert db.query(Item).filter(Item.seller_id == seller_id).count() == 0
        assert db.query(CartEntry).filter(CartEntry.item_id == item_id).count() == 0
        # the other account's cart survives
        assert db.query(Cart).filter(Cart.owner_id == buyer_id).count() == 1
    finally:
        db.close()

    assert client.get("/cart", headers=auth(token)).status_code == 401
