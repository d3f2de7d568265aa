# backend/app/schemas/cart_schema.py
from uuid import UUID

from pydantic import BaseModel, Field


class CartLineIn(BaseModel):
    item_id: UUID
    quantity: int = Field(..., gt=0)
