from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.encoders import jsonable_encoder
from pydantic import EmailStr
from sqlalchemy.orm import Session
from app.db import get_db
from app.schemas.order_schema import OrderIn
from app.services.exceptions import NotFoundError, ValidationError
from app.services.order_service import OrderService
from app.utils.money import MONEY_ENCODER

router = APIRouter(prefix="/orders", tags=["orders"])

@router.post("", status_code=status.HTTP_201_CREATED, summary="Submit order (checkout)")
def create_order(payload: OrderIn, db: Session = Depends(get_db)):
    svc = OrderService(db)
    try:
        summary = svc.submit_order(payload.email, [line.model_dump() for line in payload.cart])
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.to_errors())
    return jsonable_encoder(summary, custom_encoder=MONEY_ENCODER)

@router.get("/{order_id}", summary="Look up an order by id and purchaser email")
def get_order(order_id: int, email: EmailStr = Query(...), db: Session = Depends(get_db)):
    svc = OrderService(db)
    order = svc.get_order(order_id)
    if not order or order["email"] != email.strip().lower():
        raise HTTPException(status_code=404, detail="Order not found")
    return jsonable_encoder(order, custom_encoder=MONEY_ENCODER)
