from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from app.api.deps import get_current_account
from app.db import get_db
from app.models.account import Account
from app.schemas.account_schema import AccountCreate, AccountUpdate
from app.services.account_service import AccountService
from app.services.auth_service import AuthService
from app.services.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.utils.money import MONEY_ENCODER

router = APIRouter(prefix="/account", tags=["account"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register an account")
def register(payload: AccountCreate, db: Session = Depends(get_db)):
    svc = AuthService(db)
    try:
        token = svc.register(payload.username, payload.email, payload.password)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.to_errors())
    return {"token": token}


@router.get("/{username}", summary="Public profile and listed items")
def get_account(username: str, db: Session = Depends(get_db)):
    svc = AccountService(db)
    try:
        profile = svc.public_profile(username.strip())
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return jsonable_encoder(profile, custom_encoder=MONEY_ENCODER)


@router.put("/{username}", summary="Update own profile")
def update_account(
    username: str,
    payload: AccountUpdate,
    current: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    svc = AccountService(db)
    try:
        svc.update_profile(
            current,
            username.strip(),
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            new_password=payload.new_password,
        )
    except ForbiddenError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.to_errors())
    return {"ok": True}


@router.delete("/{username}", summary="Delete own account")
def delete_account(
    username: str,
    current: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    svc = AccountService(db)
    try:
        svc.delete_account(current, username.strip())
    except ForbiddenError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return {"ok": True}
