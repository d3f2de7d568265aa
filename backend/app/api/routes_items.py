from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from app.api.deps import get_current_account
from app.db import get_db
from app.models.account import Account
from app.schemas.item_schema import ItemCreate, ItemUpdate
from app.services.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.services.item_service import ItemService
from app.utils.money import MONEY_ENCODER

router = APIRouter(prefix="/items", tags=["items"])


def _item_id_or_none(raw: str) -> Optional[str]:
    try:
        return str(UUID(raw.strip()))
    except ValueError:
        return None


@router.post("", status_code=status.HTTP_201_CREATED, summary="List an item for sale")
def create_item(
    payload: ItemCreate,
    current: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    svc = ItemService(db)
    try:
        item_id = svc.create_item(
            current,
            payload.name.strip(),
            payload.description.strip(),
            payload.price,
            payload.quantity,
            payload.category,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.to_errors())
    return {"item_id": item_id}


@router.get("", summary="Browse items")
def list_items(
    p: Optional[str] = Query(None, description="relevent | low | high"),
    c: Optional[str] = Query(None, description="category name or all"),
    o: Optional[str] = Query(None, description="offset"),
    l: Optional[str] = Query(None, description="limit, 10-100"),
    db: Session = Depends(get_db),
):
    svc = ItemService(db)
    items = svc.list_items(p=p, c=c, o=o, l=l)
    return jsonable_encoder({"items": items}, custom_encoder=MONEY_ENCODER)


@router.get("/{item_id}", summary="Get item")
def get_item(item_id: str, db: Session = Depends(get_db)):
    key = _item_id_or_none(item_id)
    if key is None:
        raise HTTPException(status_code=404, detail="Item not found")
    svc = ItemService(db)
    try:
        item = svc.get_item(key)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Item not found")
    return jsonable_encoder({"item": item}, custom_encoder=MONEY_ENCODER)


@router.put("/{item_id}", summary="Edit own item")
def update_item(
    item_id: str,
    payload: ItemUpdate,
    current: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    key = _item_id_or_none(item_id)
    if key is None:
        raise HTTPException(status_code=403, detail="You do not own this item")
    svc = ItemService(db)
    try:
        svc.update_item(
            current,
            key,
            name=payload.name,
            description=payload.description,
            price=payload.price,
            quantity=payload.quantity,
            category=payload.category,
        )
    except ForbiddenError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.to_errors())
    return {"ok": True}


@router.delete("/{item_id}", summary="Delete own item")
def delete_item(
    item_id: str,
    current: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    key = _item_id_or_none(item_id)
    if key is None:
        raise HTTPException(status_code=403, detail="You do not own this item")
    svc = ItemService(db)
    try:
        svc.delete_item(current, key)
    except ForbiddenError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return {"ok": True}
