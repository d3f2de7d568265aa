from typing import List, Optional

from sqlalchemy import delete, update
from sqlalchemy.orm import Session

from app.models.account import Account
from app.models.cart import Cart
from app.models.cart_entry import CartEntry
from app.models.category import Category
from app.models.item import Item


class CartRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_owner(self, account_id: int) -> Optional[Cart]:
        return self.db.query(Cart).filter(Cart.owner_id == account_id).first()

    def create_for_owner(self, account_id: int) -> Cart:
        c = Cart(owner_id=account_id)
        self.db.add(c)
        self.db.flush()
        return c

    def get_entry(self, cart_id: int, item_id: str) -> Optional[CartEntry]:
        return (
            self.db.query(CartEntry)
            .filter(CartEntry.cart_id == cart_id, CartEntry.item_id == item_id)
            .first()
        )

    def upsert_entry(self, cart_id: int, item_id: str, quantity: int) -> CartEntry:
        entry = self.get_entry(cart_id, item_id)
        if entry:
            entry.quantity = quantity
        else:
            entry = CartEntry(cart_id=cart_id, item_id=item_id, quantity=quantity)
            self.db.add(entry)
        self.db.flush()
        return entry

    def delete_entry(self, cart_id: int, item_id: str):
        self.db.execute(
            delete(CartEntry)
            .where(CartEntry.cart_id == cart_id, CartEntry.item_id == item_id)
            .execution_options(synchronize_session=False)
        )

    def list_entries(self, account_id: int) -> List[tuple]:
        """Entries joined with item display data, oldest placement first."""
        return (
            self.db.query(
                CartEntry,
                Item.name,
                Item.price,
                Account.username,
                Category.name,
            )
            .join(Cart, CartEntry.cart_id == Cart.id)
            .join(Item, CartEntry.item_id == Item.id)
            .outerjoin(Account, Item.seller_id == Account.id)
            .outerjoin(Category, Item.category_id == Category.id)
            .filter(Cart.owner_id == account_id)
            .order_by(CartEntry.date_placed, CartEntry.id)
            .all()
        )

    def clamp_entries_for_item(self, item_id: str, stock: int) -> int:
        """
        Cap every entry referencing item_id at the given stock level.
        A sold-out item is dropped from carts rather than kept at 0.
        """
        if stock <= 0:
            result = self.db.execute(
                delete(CartEntry)
                .where(CartEntry.item_id == item_id)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount
        result = self.db.execute(
            update(CartEntry)
            .where(CartEntry.item_id == item_id, CartEntry.quantity > stock)
            .values(quantity=stock)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_entries_for_item(self, item_id: str):
        self.db.execute(
            delete(CartEntry)
            .where(CartEntry.item_id == item_id)
            .execution_options(synchronize_session=False)
        )

    def delete_cart_for_owner(self, account_id: int):
        """Entries first, then the cart row."""
        cart = self.get_by_owner(account_id)
        if not cart:
            return
        self.db.execute(
            delete(CartEntry)
            .where(CartEntry.cart_id == cart.id)
            .execution_options(synchronize_session=False)
        )
        self.db.execute(
            delete(Cart)
            .where(Cart.id == cart.id)
            .execution_options(synchronize_session=False)
        )
