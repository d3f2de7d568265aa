from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db import Base


class CartEntry(Base):
    __tablename__ = "cart_entries"
    __table_args__ = (
        UniqueConstraint("cart_id", "item_id", name="uq_cart_entries_cart_item"),
    )

    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(
        Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_id = Column(
        String(36), ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    quantity = Column(Integer, nullable=False, default=1)
    date_placed = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    cart = relationship("Cart", back_populates="entries")
    item = relationship("Item")
