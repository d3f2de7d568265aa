import logging
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.config import settings
from app.repositories.cart_repo import CartRepository
from app.repositories.item_repo import ItemRepository
from app.services.exceptions import (
    InsufficientStockError,
    NotFoundError,
    StorageError,
)
from app.utils.money import clamp_quantity

log = logging.getLogger(__name__)


class InventoryService:
    """
    Authoritative stock operations. Callers own the transaction; nothing here
    commits. Stock is never cached: every decision re-reads the row.
    """

    def __init__(self, db: Session, retry_limit: Optional[int] = None):
        self.db = db
        self.items = ItemRepository(db)
        self.carts = CartRepository(db)
        if retry_limit is None:
            retry_limit = settings.STOCK_RETRY_LIMIT
        self.retry_limit = retry_limit

    def stock(self, item_id: str) -> Tuple[int, Decimal]:
        """Current (quantity, unit price) for item_id."""
        row = self.items.read_stock(item_id)
        if row is None:
            raise NotFoundError(f"Item not found: {item_id}")
        return row

    def available_quantity(self, item_id: str) -> int:
        return self.stock(item_id)[0]

    def decrement(self, item_id: str, amount: int) -> int:
        """
        Conditional decrement: take exactly `amount` or nothing.
        Returns the remaining stock.
        """
        if amount < 0:
            raise ValueError("amount must not be negative")
        if amount and not self.items.conditional_decrement(item_id, amount):
            available = self.available_quantity(item_id)
            raise InsufficientStockError(item_id, amount, available)
        remaining = self.available_quantity(item_id)
        self.carts.clamp_entries_for_item(item_id, remaining)
        return remaining

    def allocate(self, item_id: str, requested: int) -> Tuple[int, Decimal]:
        """
        Take up to `requested` units, capped by live stock.

        Returns (fulfilled, unit_price). A concurrent writer that shrinks the
        stock between the read and the conditional UPDATE makes the UPDATE
        match no row; the read is then repeated against the new level.
        """
        for attempt in range(1, self.retry_limit + 1):
            available, price = self.stock(item_id)
            fulfilled = clamp_quantity(requested, available)
            if fulfilled == 0:
                return 0, price
            try:
                remaining = self.decrement(item_id, fulfilled)
            except InsufficientStockError:
                log.warning(
                    "stock contention on item %s (attempt %d/%d)",
                    item_id,
                    attempt,
                    self.retry_limit,
                )
                continue
            log.debug(
                "allocated %d/%d of item %s, %d left",
                fulfilled,
                requested,
                item_id,
                remaining,
            )
            return fulfilled, price
        raise StorageError(f"Could not allocate stock for item {item_id}; try again")

    def set_quantity(self, item_id: str, quantity: int) -> int:
        """Seller-side stock reset; cart entries above the new level are capped."""
        if quantity < 0:
            raise ValueError("quantity must not be negative")
        if not self.items.set_quantity(item_id, quantity):
            raise NotFoundError(f"Item not found: {item_id}")
        clamped = self.carts.clamp_entries_for_item(item_id, quantity)
        if clamped:
            log.debug("capped %d cart entries for item %s at %d", clamped, item_id, quantity)
        return quantity
