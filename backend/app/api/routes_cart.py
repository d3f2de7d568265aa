from app.api.deps import get_current_account
from app.db import get_db
from app.models.account import Account
from app.schemas.cart_schema import CartLineIn
from app.services.cart_service import CartService
from app.services.exceptions import NotFoundError
from app.utils.money import MONEY_ENCODER
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

router = APIRouter(prefix="/cart", tags=["cart"])

CART_METHODS = ("add", "remove")


@router.get("", summary="Get cart")
def get_cart(
    current: Account = Depends(get_current_account), db: Session = Depends(get_db)
):
    svc = CartService(db)
    return jsonable_encoder({"cart": svc.get_cart(current.id)}, custom_encoder=MONEY_ENCODER)


@router.put("", summary="Add to or remove from cart")
def modify_cart(
    payload: CartLineIn,
    m: str = Query(..., description="add | remove"),
    current: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    method = m.strip()
    if method not in CART_METHODS:
        raise HTTPException(
            status_code=400,
            detail=[
                {
                    "param": "m",
                    "message": "Invalid method: must be 'add' or 'remove'",
                    "value": m,
                }
            ],
        )
    svc = CartService(db)
    item_id = str(payload.item_id)
    try:
        if method == "add":
            quantity = svc.add_item(current.id, item_id, payload.quantity)
        else:
            quantity = svc.remove_item(current.id, item_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"item_id": item_id, "quantity": quantity}
