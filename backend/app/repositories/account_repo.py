from typing import Optional

from sqlalchemy import delete, func
from sqlalchemy.orm import Session

from app.models.account import Account
from app.models.item import Item


class AccountRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, account_id: int) -> Optional[Account]:
        return self.db.get(Account, account_id)

    def get_by_username(self, username: str) -> Optional[Account]:
        return self.db.query(Account).filter(Account.username == username).first()

    def get_by_email(self, email: str) -> Optional[Account]:
        return (
            self.db.query(Account)
            .filter(func.lower(Account.email) == email.strip().lower())
            .first()
        )

    def create(self, username: str, email: str, hashed_password: str) -> Account:
        acct = Account(username=username, email=email, hashed_password=hashed_password)
        self.db.add(acct)
        self.db.flush()
        return acct

    def item_ids_for_seller(self, account_id: int):
        return [
            item_id
            for (item_id,) in self.db.query(Item.id).filter(Item.seller_id == account_id)
        ]

    def delete_items_for_seller(self, account_id: int):
        self.db.execute(
            delete(Item)
            .where(Item.seller_id == account_id)
            .execution_options(synchronize_session=False)
        )

    def delete(self, account_id: int):
        self.db.execute(
            delete(Account)
            .where(Account.id == account_id)
            .execution_options(synchronize_session=False)
        )
