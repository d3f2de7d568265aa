# backend/app/schemas/order_schema.py
from typing import List

from pydantic import BaseModel, EmailStr, Field

from app.schemas.cart_schema import CartLineIn


class OrderIn(BaseModel):
    email: EmailStr
    cart: List[CartLineIn] = Field(..., min_length=1)
