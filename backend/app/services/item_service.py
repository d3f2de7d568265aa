import logging
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.db import CATEGORIES
from app.models.account import Account
from app.models.item import Item
from app.repositories.cart_repo import CartRepository
from app.repositories.item_repo import PRICE_ORDERING, ItemRepository
from app.services.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.services.inventory_service import InventoryService
from app.utils.money import to_money
from app.utils.transactions import smart_transaction

log = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
MIN_LIMIT = 10
MAX_LIMIT = 100
MAX_BIND_INT = 2**63 - 1


def item_summary(item: Item, seller: Optional[str], category: Optional[str]) -> Dict:
    return {
        "item_id": item.id,
        "name": item.name,
        "price": item.price,
        "quantity": item.quantity,
        "seller": seller,
        "category": category,
    }


def _whole_number(value) -> Optional[int]:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    # SQLite binds OFFSET/LIMIT as signed 64-bit
    if number > MAX_BIND_INT:
        return None
    return number


def sanitize_listing_params(p=None, c=None, o=None, l=None) -> Dict:
    """Out-of-range listing parameters fall back to defaults instead of failing."""
    price_order = p if p in PRICE_ORDERING else "relevent"
    category = c if c in CATEGORIES else "all"
    offset = _whole_number(o)
    if offset is None or offset < 0:
        offset = 0
    limit = _whole_number(l)
    if limit is None or limit < MIN_LIMIT or limit > MAX_LIMIT:
        limit = DEFAULT_LIMIT
    return {"p": price_order, "c": category, "o": offset, "l": limit}


class ItemService:
    def __init__(self, db: Session):
        self.db = db
        self.items = ItemRepository(db)
        self.carts = CartRepository(db)
        self.inventory = InventoryService(db)

    def _category_id(self, name: str) -> int:
        category = self.items.get_category(name.strip().lower())
        if category is None:
            raise ValidationError("Category was not found", param="category", value=name)
        return category.id

    def _owned(self, seller: Account, item_id: str) -> Item:
        item = self.items.get(item_id)
        if item is None or item.seller_id != seller.id:
            raise ForbiddenError("You do not own this item")
        return item

    def create_item(
        self,
        seller: Account,
        name: str,
        description: str,
        price: Decimal,
        quantity: int,
        category: str,
    ) -> str:
        with smart_transaction(self.db):
            category_id = self._category_id(category)
            item = self.items.create(
                seller.id, name, description, to_money(price), quantity, category_id
            )
            item_id = item.id
        log.info("item %s listed by account %s", item_id, seller.id)
        return item_id

    def list_items(self, p=None, c=None, o=None, l=None) -> List[Dict]:
        params = sanitize_listing_params(p, c, o, l)
        categories = CATEGORIES if params["c"] == "all" else [params["c"]]
        rows = self.items.list(
            price_order=params["p"],
            categories=categories,
            offset=params["o"],
            limit=params["l"],
        )
        result = [item_summary(item, seller, category) for item, seller, category in rows]
        self.db.rollback()
        return result

    def get_item(self, item_id: str) -> Dict:
        item = self.items.get(item_id)
        if item is None:
            raise NotFoundError(f"Item not found: {item_id}")
        view = {
            "name": item.name,
            "description": item.description,
            "seller": item.seller.username if item.seller else None,
            "price": item.price,
            "quantity": item.quantity,
            "category": item.category.name if item.category else None,
            "date_added": item.date_added,
        }
        self.db.rollback()
        return view

    def update_item(
        self,
        seller: Account,
        item_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        price: Optional[Decimal] = None,
        quantity: Optional[int] = None,
        category: Optional[str] = None,
    ):
        with smart_transaction(self.db):
            item = self._owned(seller, item_id)
            if name:
                item.name = name
            if description:
                item.description = description
            if price is not None:
                item.price = to_money(price)
            if category:
                item.category_id = self._category_id(category)
            self.db.flush()
            if quantity is not None:
                self.inventory.set_quantity(item_id, quantity)
        log.info("item %s updated by account %s", item_id, seller.id)

    def delete_item(self, seller: Account, item_id: str):
        with smart_transaction(self.db):
            item = self._owned(seller, item_id)
            self.carts.delete_entries_for_item(item_id)
            self.items.delete(item)
        log.info("item %s deleted by account %s", item_id, seller.id)
