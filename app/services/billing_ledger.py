# FILE: app/services/billing_ledger.py
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, List, Optional

from sqlalchemy.orm import Session, selectinload

from app.models.billing import Invoice, InvoiceItem
from app.models.patient import Patient
from app.services.billing_errors import InvalidInvoiceData, NotFound
from app.services.billing_math import money2, parse_amount

logger = logging.getLogger(__name__)

INVOICE_ITEM_SHAPE = {"description": "string", "amount": "number >= 0"}


def _field(obj: Any, name: str):
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _clean_items(items: Optional[Iterable[Any]]) -> List[dict]:
    rows = list(items or [])
    if not rows:
        raise InvalidInvoiceData(
            "Invalid invoice data",
            details={
                "required": ["patient_id:int", "items:array (non-empty)"],
                "item_shape": INVOICE_ITEM_SHAPE,
            },
        )

    out = []
    for idx, it in enumerate(rows):
        desc = _field(it, "description")
        desc = desc.strip() if isinstance(desc, str) else ""
        amt = parse_amount(_field(it, "amount"))
        if not desc or amt is None or amt < 0:
            raise InvalidInvoiceData(
                f"Invalid invoice item at position {idx}",
                details={"item_shape": INVOICE_ITEM_SHAPE},
            )
        out.append({"description": desc[:300], "amount": amt})
    return out


def create_invoice(db: Session, *, patient_id: Optional[int],
                   items: Optional[Iterable[Any]]) -> Invoice:
    """
    Persist one invoice with its line items inside the caller's transaction.

    total_amount = sum(items.amount), must be positive, fixed from here on.
    is_paid starts False; only add_payment() changes it.
    The caller owns commit/rollback.
    """
    if not patient_id:
        raise InvalidInvoiceData(
            "Invalid invoice data",
            details={"required": ["patient_id:int", "items:array (non-empty)"]},
        )
    clean = _clean_items(items)

    if not db.get(Patient, int(patient_id)):
        raise NotFound("Patient not found")

    total = money2(sum((r["amount"] for r in clean), Decimal("0")))
    # a zero total could never take a payment and would stay unpaid
    if total <= 0:
        raise InvalidInvoiceData(
            "Invoice total must be greater than zero",
            details={"total_amount": str(total)},
        )

    inv = Invoice(
        patient_id=int(patient_id),
        total_amount=total,
        is_paid=False,
        items=[InvoiceItem(**r) for r in clean],
    )
    db.add(inv)
    db.flush()

    logger.info("Invoice %s created patient_id=%s items=%s total=%s", inv.id,
                inv.patient_id, len(clean), total)
    return inv


def get_invoice(db: Session, invoice_id: int) -> Invoice:
    inv = (db.query(Invoice).options(
        selectinload(Invoice.items), selectinload(Invoice.payments),
        selectinload(Invoice.patient)).filter(
            Invoice.id == int(invoice_id)).first())
    if not inv:
        raise NotFound("Invoice not found")
    return inv


def list_invoices(db: Session,
                  *,
                  patient_id: Optional[int] = None,
                  is_paid: Optional[bool] = None) -> List[Invoice]:
    q = db.query(Invoice).options(selectinload(Invoice.items),
                                  selectinload(Invoice.payments),
                                  selectinload(Invoice.patient))
    if patient_id is not None:
        q = q.filter(Invoice.patient_id == int(patient_id))
    if is_paid is not None:
        q = q.filter(Invoice.is_paid.is_(bool(is_paid)))
    return q.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()
