# FILE: app/services/price_catalog.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.price import Price, PriceType
from app.services.billing_errors import (
    InvalidPriceData,
    NotFound,
    PriceConflict,
    PricingNotConfigured,
)
from app.services.billing_math import parse_amount

logger = logging.getLogger(__name__)

PRICE_TYPES = {t.value for t in PriceType}


def _norm_type(v: Any) -> str:
    s = (getattr(v, "value", v) or "")
    s = str(s).strip().upper()
    if s not in PRICE_TYPES:
        raise InvalidPriceData("Invalid type",
                               details={"type": "APPOINTMENT|LAB"})
    return s


def _norm_text(v: Any, field: str, max_len: int) -> str:
    s = (v or "").strip() if isinstance(v, str) else ""
    if not s:
        raise InvalidPriceData(f"{field} is required",
                               details={field: "non-empty string"})
    if len(s) > max_len:
        raise InvalidPriceData(f"{field} too long (max {max_len})")
    return s


def _norm_amount(v: Any):
    amt = parse_amount(v)
    if amt is None or amt < 0:
        raise InvalidPriceData("Invalid amount", details={"amount": "number >= 0"})
    return amt


# ============================================================
# Lookups used by settlement
# ============================================================
def resolve_active_price(db: Session, price_type: PriceType | str,
                         *criteria) -> Price:
    """
    First active price of the given type (lowest id wins), optionally
    narrowed by extra SQLAlchemy criteria.

    Raises PricingNotConfigured when nothing matches: that is a catalog
    problem for an operator, not a caller error.
    """
    t = _norm_type(price_type)
    q = db.query(Price).filter(Price.type == t, Price.active.is_(True))
    for c in criteria:
        q = q.filter(c)
    price = q.order_by(Price.id.asc()).first()
    if not price:
        label = t.lower()
        raise PricingNotConfigured(
            f"Payment failed: {label} pricing is not configured.")
    return price


def get_price(db: Session, price_id: int) -> Price:
    price = db.get(Price, int(price_id))
    if not price:
        raise NotFound("Price not found")
    return price


def list_prices(db: Session, *, price_type: Optional[str] = None,
                active: Optional[bool] = None) -> List[Price]:
    q = db.query(Price)
    if price_type:
        q = q.filter(Price.type == _norm_type(price_type))
    if active is not None:
        q = q.filter(Price.active.is_(bool(active)))
    return q.order_by(Price.created_at.desc(), Price.id.desc()).all()


def list_lab_examinations(db: Session) -> List[Price]:
    return (db.query(Price).filter(Price.type == PriceType.LAB.value).filter(
        Price.active.is_(True)).order_by(Price.name.asc()).all())


# ============================================================
# Admin maintenance (the settlement path never writes prices)
# ============================================================
def create_price(db: Session, data: Dict[str, Any]) -> Price:
    ptype = _norm_type(data.get("type"))
    code = _norm_text(data.get("code"), "code", 40)
    price = Price(
        type=ptype,
        code=code,
        name=_norm_text(data.get("name"), "name", 255),
        amount=_norm_amount(data.get("amount")),
        active=bool(data["active"]) if data.get("active") is not None else True,
    )
    db.add(price)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise PriceConflict(
            f"Price code {code} already exists for type {ptype}")
    db.refresh(price)
    logger.info("Price created id=%s type=%s code=%s amount=%s", price.id,
                price.type, price.code, price.amount)
    return price


def update_price(db: Session, price_id: int, data: Dict[str, Any]) -> Price:
    price = get_price(db, price_id)

    if data.get("type") is not None:
        price.type = _norm_type(data["type"])
    if data.get("code") is not None:
        price.code = _norm_text(data["code"], "code", 40)
    if data.get("name") is not None:
        price.name = _norm_text(data["name"], "name", 255)
    if data.get("amount") is not None:
        price.amount = _norm_amount(data["amount"])
    if data.get("active") is not None:
        price.active = bool(data["active"])

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise PriceConflict("Another price already uses this type and code")
    db.refresh(price)
    return price


def delete_price(db: Session, price_id: int) -> None:
    price = get_price(db, price_id)
    logger.info("Deleting price id=%s code=%s", price.id, price.code)
    db.delete(price)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise PriceConflict("Price is still referenced and cannot be deleted")
