from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.models.account import Account
from app.models.category import Category
from app.models.item import Item

# p query parameter -> ORDER BY
PRICE_ORDERING = {
    "relevent": None,
    "low": Item.price.asc(),
    "high": Item.price.desc(),
}


class ItemRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, item_id: str) -> Optional[Item]:
        return self.db.get(Item, item_id)

    def read_stock(self, item_id: str) -> Optional[Tuple[int, Decimal]]:
        """
        Fresh (quantity, price) for an item, bypassing the identity map so
        decrements issued as bulk UPDATEs are always visible.
        """
        row = self.db.execute(
            select(Item.quantity, Item.price).where(Item.id == item_id)
        ).first()
        if row is None:
            return None
        return int(row.quantity), row.price

    def conditional_decrement(self, item_id: str, amount: int) -> bool:
        """
        UPDATE items SET quantity = quantity - :amount
        WHERE id = :id AND quantity >= :amount

        Returns True when exactly one row was changed.
        """
        result = self.db.execute(
            update(Item)
            .where(Item.id == item_id, Item.quantity >= amount)
            .values(quantity=Item.quantity - amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def set_quantity(self, item_id: str, quantity: int) -> bool:
        result = self.db.execute(
            update(Item)
            .where(Item.id == item_id)
            .values(quantity=quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def create(
        self,
        seller_id: int,
        name: str,
        description: str,
        price: Decimal,
        quantity: int,
        category_id: int,
    ) -> Item:
        item = Item(
            seller_id=seller_id,
            name=name,
            description=description,
            price=price,
            quantity=quantity,
            category_id=category_id,
        )
        self.db.add(item)
        self.db.flush()
        return item

    def delete(self, item: Item):
        self.db.delete(item)
        self.db.flush()

    def list(
        self,
        price_order: str = "relevent",
        categories: Optional[List[str]] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> List[tuple]:
        query = (
            self.db.query(Item, Account.username, Category.name)
            .outerjoin(Account, Item.seller_id == Account.id)
            .outerjoin(Category, Item.category_id == Category.id)
        )
        if categories:
            query = query.filter(Category.name.in_(categories))
        ordering = PRICE_ORDERING.get(price_order)
        if ordering is not None:
            query = query.order_by(ordering, Item.date_added)
        else:
            query = query.order_by(Item.date_added)
        return query.offset(offset).limit(limit).all()

    def list_by_seller(self, seller_id: int) -> List[tuple]:
        return (
            self.db.query(Item, Account.username, Category.name)
            .outerjoin(Account, Item.seller_id == Account.id)
            .outerjoin(Category, Item.category_id == Category.id)
            .filter(Item.seller_id == seller_id)
            .order_by(Item.date_added)
            .all()
        )

    def get_category(self, name: str) -> Optional[Category]:
        return self.db.query(Category).filter(Category.name == name).first()
