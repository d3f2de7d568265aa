from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.models.order import Order, OrderLine


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, email: str) -> Order:
        order = Order(purchased_by=email, amount_total=Decimal("0.00"))
        self.db.add(order)
        self.db.flush()
        return order

    def add_line(
        self, order: Order, item_id: str, quantity: int, total: Decimal
    ) -> OrderLine:
        line = OrderLine(order_id=order.id, item_id=item_id, quantity=quantity, total=total)
        self.db.add(line)
        self.db.flush()
        return line

    def set_total(self, order: Order, total: Decimal) -> Order:
        order.amount_total = total
        self.db.flush()
        return order

    def get(self, order_id: int) -> Optional[Order]:
        return self.db.get(Order, order_id)
