from app.models.account import Account
from app.models.category import Category
from app.models.item import Item
from app.models.cart import Cart
from app.models.cart_entry import CartEntry
from app.models.order import Order, OrderLine

__all__ = [
    "Account",
    "Category",
    "Item",
    "Cart",
    "CartEntry",
    "Order",
    "OrderLine",
]
