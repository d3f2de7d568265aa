import logging
from typing import Dict, Optional

from sqlalchemy.orm import Session

from app.models.account import Account
from app.repositories.account_repo import AccountRepository
from app.repositories.cart_repo import CartRepository
from app.repositories.item_repo import ItemRepository
from app.services.auth_service import get_password_hash
from app.services.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.services.item_service import item_summary
from app.utils.transactions import smart_transaction

log = logging.getLogger(__name__)


class AccountService:
    def __init__(self, db: Session):
        self.db = db
        self.accounts = AccountRepository(db)
        self.carts = CartRepository(db)
        self.items = ItemRepository(db)

    def _require_owner(self, current: Account, username: str):
        if current.username != username:
            raise ForbiddenError("You may only change your own account")

    def public_profile(self, username: str) -> Dict:
        acct = self.accounts.get_by_username(username)
        if not acct:
            raise NotFoundError(f"Account not found: {username}")
        profile = {
            "user": {
                "username": acct.username,
                "first_name": acct.first_name,
                "last_name": acct.last_name,
                "created_on": acct.created_on,
            },
            "items": [
                item_summary(item, seller, category)
                for item, seller, category in self.items.list_by_seller(acct.id)
            ],
        }
        self.db.rollback()
        return profile

    def update_profile(
        self,
        current: Account,
        username: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        new_password: Optional[str] = None,
    ):
        self._require_owner(current, username)
        if not (first_name or last_name or email or new_password):
            raise ValidationError("No info has been given to update")
        with smart_transaction(self.db):
            acct = self.accounts.get(current.id)
            if first_name:
                acct.first_name = first_name
            if last_name:
                acct.last_name = last_name
            if email:
                email = email.strip().lower()
                other = self.accounts.get_by_email(email)
                if other and other.id != acct.id:
                    raise ValidationError("Email is already in use", param="email", value=email)
                acct.email = email
            if new_password:
                acct.hashed_password = get_password_hash(new_password)
            self.db.flush()
        log.info("account %s updated", username)

    def delete_account(self, current: Account, username: str):
        """
        Cart entries, then the cart, then the seller's items (and any other
        cart entries pointing at them), then the account; all or nothing.
        """
        self._require_owner(current, username)
        account_id = current.id
        with smart_transaction(self.db):
            self.carts.delete_cart_for_owner(account_id)
            for item_id in self.accounts.item_ids_for_seller(account_id):
                self.carts.delete_entries_for_item(item_id)
            self.accounts.delete_items_for_seller(account_id)
            self.accounts.delete(account_id)
        self.db.expunge_all()
        log.info("account %s (%s) deleted", account_id, username)
