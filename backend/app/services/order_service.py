import logging
from typing import Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from app.config import settings
from app.repositories.account_repo import AccountRepository
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.services.exceptions import ValidationError
from app.services.inventory_service import InventoryService
from app.utils.money import line_total, sum_money
from app.utils.transactions import smart_transaction

log = logging.getLogger(__name__)


class OrderService:
    def __init__(self, db: Session, clear_cart_on_checkout: Optional[bool] = None):
        self.db = db
        self.orders = OrderRepository(db)
        self.inventory = InventoryService(db)
        if clear_cart_on_checkout is None:
            clear_cart_on_checkout = settings.CLEAR_CART_ON_CHECKOUT
        self.clear_cart_on_checkout = clear_cart_on_checkout

    def submit_order(self, email: str, lines: Sequence[Dict]) -> Dict:
        """
        lines: list of {item_id: str, quantity: int}, processed in order.

        Each line takes min(requested, live stock) and decrements the item by
        exactly that much. A line for an item with no stock left becomes a
        zero line; it does not abort the order. Lines naming the same item
        compete for the same remaining stock.

        The header, every line, every decrement and the final total commit
        together. An item that vanished since validation raises NotFoundError
        and nothing is kept.
        """
        if not lines:
            raise ValidationError("Order must contain at least one line", param="cart")
        for line in lines:
            if int(line["quantity"]) <= 0:
                raise ValidationError(
                    "Quantity must be positive", param="quantity", value=line["quantity"]
                )

        email = email.strip().lower()
        with smart_transaction(self.db):
            order = self.orders.create_order(email)

            placed: List[Dict] = []
            for line in lines:
                item_id = str(line["item_id"])
                requested = int(line["quantity"])
                fulfilled, unit_price = self.inventory.allocate(item_id, requested)
                total = line_total(fulfilled, unit_price)
                self.orders.add_line(order, item_id, fulfilled, total)
                placed.append(
                    {
                        "item_id": item_id,
                        "requested": requested,
                        "quantity": fulfilled,
                        "unit_price": unit_price,
                        "total": total,
                    }
                )

            amount_total = sum_money(p["total"] for p in placed)
            self.orders.set_total(order, amount_total)

            if self.clear_cart_on_checkout:
                self._settle_cart(email, placed)

            resp = {
                "order_id": order.id,
                "email": order.purchased_by,
                "time_of_purchase": order.time_of_purchase,
                "total": amount_total,
                "lines": placed,
            }

        log.info(
            "order %s submitted by %s: %d lines, total %s",
            resp["order_id"],
            email,
            len(placed),
            amount_total,
        )
        return resp

    def _settle_cart(self, email: str, placed: List[Dict]):
        """Take fulfilled quantities off the purchaser's cart, if they have an account."""
        account = AccountRepository(self.db).get_by_email(email)
        if not account:
            return
        carts = CartRepository(self.db)
        cart = carts.get_by_owner(account.id)
        if not cart:
            return
        for p in placed:
            if p["quantity"] == 0:
                continue
            entry = carts.get_entry(cart.id, p["item_id"])
            if not entry:
                continue
            if entry.quantity > p["quantity"]:
                entry.quantity = entry.quantity - p["quantity"]
            else:
                carts.delete_entry(cart.id, p["item_id"])
        self.db.flush()

    def get_order(self, order_id: int) -> Optional[Dict]:
        order = self.orders.get(order_id)
        if not order:
            return None
        resp = {
            "order_id": order.id,
            "email": order.purchased_by,
            "time_of_purchase": order.time_of_purchase,
            "total": order.amount_total,
            "lines": [
                {"item_id": l.item_id, "quantity": l.quantity, "total": l.total}
                for l in order.lines
            ],
        }
        self.db.rollback()
        return resp
