# FILE: app/api/routes_prices.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_roles
from app.models.user import User, UserRole
from app.schemas.price import PriceCreate, PriceOut, PriceUpdate
from app.services import price_catalog

router = APIRouter()

admin_only = require_roles(UserRole.ADMIN)


@router.get("", response_model=List[PriceOut])
def price_list(
        price_type: Optional[str] = Query(None, alias="type"),
        active: Optional[bool] = Query(None),
        db: Session = Depends(get_db),
        user: User = Depends(admin_only),
):
    return price_catalog.list_prices(db, price_type=price_type, active=active)


@router.post("", response_model=PriceOut, status_code=201)
def price_create(
        payload: PriceCreate,
        db: Session = Depends(get_db),
        user: User = Depends(admin_only),
):
    return price_catalog.create_price(db, payload.model_dump())


@router.get("/{price_id}", response_model=PriceOut)
def price_get(
        price_id: int,
        db: Session = Depends(get_db),
        user: User = Depends(admin_only),
):
    return price_catalog.get_price(db, price_id)


@router.patch("/{price_id}", response_model=PriceOut)
def price_update(
        price_id: int,
        payload: PriceUpdate,
        db: Session = Depends(get_db),
        user: User = Depends(admin_only),
):
    return price_catalog.update_price(db, price_id,
                                      payload.model_dump(exclude_unset=True))


@router.delete("/{price_id}")
def price_delete(
        price_id: int,
        db: Session = Depends(get_db),
        user: User = Depends(admin_only),
):
    price_catalog.delete_price(db, price_id)
    return {"success": True, "message": "Price deleted"}
