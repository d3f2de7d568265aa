from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from app.db import Base


class Order(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True, autoincrement=True)
    purchased_by = Column(String(255), nullable=False, index=True)
    time_of_purchase = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )
    amount_total = Column(Numeric(12, 2), nullable=False, default=0)

    lines = relationship(
        "OrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLine.id",
    )


class OrderLine(Base):
    __tablename__ = "order_lines"
    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # plain reference: historical lines outlive deleted items
    item_id = Column(String(36), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)

    order = relationship("Order", back_populates="lines")
