import logging
from typing import Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.cart import Cart
from app.repositories.cart_repo import CartRepository
from app.repositories.item_repo import ItemRepository
from app.services.exceptions import NotFoundError, StorageError
from app.utils.money import clamp_quantity
from app.utils.transactions import smart_transaction

log = logging.getLogger(__name__)


class CartService:
    def __init__(self, db: Session):
        self.db = db
        self.cart_repo = CartRepository(db)
        self.item_repo = ItemRepository(db)

    def _cart_for(self, account_id: int) -> Cart:
        cart = self.cart_repo.get_by_owner(account_id)
        if not cart:
            raise NotFoundError(f"Cart not found for account {account_id}")
        return cart

    def _set_capped(self, account_id: int, item_id: str, qty: int):
        with smart_transaction(self.db):
            cart = self._cart_for(account_id)
            row = self.item_repo.read_stock(item_id)
            if row is None:
                raise NotFoundError(f"Item not found: {item_id}")
            effective = clamp_quantity(qty, row[0])
            if effective:
                self.cart_repo.upsert_entry(cart.id, item_id, effective)
            else:
                # nothing in stock; an empty entry is no entry
                self.cart_repo.delete_entry(cart.id, item_id)
            cart_id = cart.id
        return cart_id, effective

    def add_item(self, account_id: int, item_id: str, qty: int) -> int:
        """
        Set the cart quantity for item_id to min(qty, live stock) and return it.

        An existing entry is overwritten rather than duplicated; stock is not
        touched, a cart is only a hint. With no stock left the entry is removed
        and 0 is returned.
        """
        if qty <= 0:
            raise ValueError("Quantity must be positive")
        try:
            cart_id, effective = self._set_capped(account_id, item_id, qty)
        except StorageError as exc:
            if not isinstance(exc.__cause__, IntegrityError):
                raise
            # lost an insert race on (cart, item); the row exists now
            log.debug("cart entry insert collided, retrying as update")
            cart_id, effective = self._set_capped(account_id, item_id, qty)
        log.debug(
            "cart %s: item %s set to %d (requested %d)", cart_id, item_id, effective, qty
        )
        return effective

    def remove_item(self, account_id: int, item_id: str, qty: int) -> int:
        """
        Take qty off an entry; removing at least what is there deletes it.
        Returns the quantity left (0 when the entry is gone).
        """
        if qty <= 0:
            raise ValueError("Quantity must be positive")
        with smart_transaction(self.db):
            cart = self._cart_for(account_id)
            cart_id = cart.id
            entry = self.cart_repo.get_entry(cart_id, item_id)
            if not entry:
                raise NotFoundError(f"Item {item_id} is not in the cart")
            if entry.quantity > qty:
                left = entry.quantity - qty
                entry.quantity = left
                self.db.flush()
            else:
                self.cart_repo.delete_entry(cart_id, item_id)
                left = 0
        log.debug("cart %s: item %s now %d", cart_id, item_id, left)
        return left

    def get_cart(self, account_id: int) -> List[Dict]:
        rows = self.cart_repo.list_entries(account_id)
        cart = [
            {
                "item_id": entry.item_id,
                "name": name,
                "price": price,
                "quantity": entry.quantity,
                "seller": seller,
                "category": category,
                "date_placed": entry.date_placed,
            }
            for entry, name, price, seller, category in rows
        ]
        # read-only; release the autobegun transaction
        self.db.rollback()
        return cart
