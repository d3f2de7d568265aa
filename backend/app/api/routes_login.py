from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.schemas.account_schema import LoginIn
from app.services.auth_service import AuthService
from app.services.exceptions import ValidationError

router = APIRouter(prefix="/login", tags=["login"])


@router.post("", summary="Exchange credentials for a bearer token")
def login(payload: LoginIn, db: Session = Depends(get_db)):
    svc = AuthService(db)
    try:
        token = svc.login(
            payload.password.strip(),
            username=(payload.username or "").strip() or None,
            email=(payload.email or "").strip() or None,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"token": token}
