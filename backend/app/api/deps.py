from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.account import Account
from app.services.auth_service import AuthService

bearer_scheme = HTTPBearer()


def get_current_account(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Account:
    """
    Resolve the bearer token to an Account. The account is detached from the
    session so services start their own transaction from a clean state.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    account = AuthService(db).account_for_token(credentials.credentials)
    if account is None:
        db.rollback()
        raise credentials_exception
    db.expunge(account)
    db.rollback()
    return account
