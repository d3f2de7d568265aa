from decimal import Decimal

from app.db import SessionLocal
from app.models.account import Account
from app.models.cart_entry import CartEntry
from app.models.item import Item
from app.models.order import Order, OrderLine
from app.services.auth_service import AuthService, decode_access_token
from app.services.item_service import ItemService

STRONG_PASSWORD = "Passw0rdX"


def make_account(username, email=None, password=STRONG_PASSWORD):
    """Register through AuthService; returns (account_id, token)."""
    db = SessionLocal()
    try:
        token = AuthService(db).register(
            username, email or f"{username}@example.com", password
        )
    finally:
        db.close()
    return decode_access_token(token), token


def make_item(seller_id, name="Widget", price="2.50", quantity=5, category="toys"):
    db = SessionLocal()
    try:
        seller = db.get(Account, seller_id)
        db.expunge(seller)
        db.rollback()
        return ItemService(db).create_item(
            seller, name, f"{name} description", Decimal(price), quantity, category
        )
    finally:
        db.close()


def stock_of(item_id):
    db = SessionLocal()
    try:
        item = db.get(Item, item_id)
        return item.quantity if item else None
    finally:
        db.close()


def cart_quantity(account_id, item_id):
    from app.models.cart import Cart

    db = SessionLocal()
    try:
        entry = (
            db.query(CartEntry)
            .join(Cart, CartEntry.cart_id == Cart.id)
            .filter(Cart.owner_id == account_id, CartEntry.item_id == item_id)
            .first()
        )
        return entry.quantity if entry else None
    finally:
        db.close()


def count_orders():
    db = SessionLocal()
    try:
        return db.query(Order).count(), db.query(OrderLine).count()
    finally:
        db.close()


def auth(token):
    return {"Authorization": f"Bearer {token}"}
