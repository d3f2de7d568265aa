from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.db import Base


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(20), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(100), nullable=True)
    created_on = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    cart = relationship("Cart", back_populates="owner", uselist=False)
    items = relationship("Item", back_populates="seller")

    def __repr__(self):
        return f"<Account id={self.id} username={self.username}>"
