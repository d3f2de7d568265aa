import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.config import settings
from app.models.account import Account
from app.repositories.account_repo import AccountRepository
from app.repositories.cart_repo import CartRepository
from app.services.exceptions import ValidationError
from app.utils.transactions import smart_transaction

log = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

LOGIN_FAILED = "Login or password are incorrect"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(account_id: int, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": str(account_id), "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[int]:
    """Account id carried by a valid token, None otherwise."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    sub = payload.get("sub")
    if sub is None:
        return None
    try:
        return int(sub)
    except (TypeError, ValueError):
        return None


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.accounts = AccountRepository(db)
        self.carts = CartRepository(db)

    def register(self, username: str, email: str, password: str) -> str:
        """Create the account and its cart together; returns a bearer token."""
        email = email.strip().lower()
        with smart_transaction(self.db):
            if self.accounts.get_by_username(username):
                raise ValidationError(
                    "Username is already in use", param="username", value=username
                )
            if self.accounts.get_by_email(email):
                raise ValidationError("Email is already in use", param="email", value=email)
            acct = self.accounts.create(username, email, get_password_hash(password))
            self.carts.create_for_owner(acct.id)
            account_id = acct.id
        log.info("account %s registered as %s", account_id, username)
        return create_access_token(account_id)

    def login(
        self,
        password: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> str:
        acct = None
        if username:
            acct = self.accounts.get_by_username(username)
        if email:
            acct = self.accounts.get_by_email(email)
        ok = acct is not None and verify_password(password, acct.hashed_password)
        account_id = acct.id if acct else None
        self.db.rollback()
        if not ok:
            raise ValidationError(LOGIN_FAILED)
        return create_access_token(account_id)

    def account_for_token(self, token: str) -> Optional[Account]:
        account_id = decode_access_token(token)
        if account_id is None:
            return None
        return self.accounts.get(account_id)
