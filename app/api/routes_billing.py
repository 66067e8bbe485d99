# FILE: app/api/routes_billing.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_roles
from app.models.user import User, UserRole
from app.schemas.billing import (
    InvoiceCreate,
    InvoiceOut,
    PaymentIn,
    PaymentResultOut,
)
from app.services.billing_ledger import create_invoice, get_invoice, list_invoices
from app.services.billing_payment_service import add_payment
from app.services.billing_tx import atomic

logger = logging.getLogger(__name__)

router = APIRouter()

BILLING_ROLES = (UserRole.ACCOUNTANT, UserRole.CASHIER)


def _int_or_none(raw: Optional[str], name: str) -> Optional[int]:
    if raw is None or str(raw).strip() == "":
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric %s filter: %r", name, raw)
        return None


@router.post("/invoices", response_model=InvoiceOut, status_code=201)
def invoice_create(
        payload: InvoiceCreate,
        db: Session = Depends(get_db),
        user: User = Depends(require_roles(*BILLING_ROLES)),
):
    with atomic(db, action="Create invoice"):
        inv = create_invoice(db,
                             patient_id=payload.patient_id,
                             items=payload.items)
    return get_invoice(db, inv.id)


@router.get("/invoices", response_model=List[InvoiceOut])
def invoice_list(
        patient_id: Optional[str] = Query(None),
        is_paid: Optional[bool] = Query(None),
        db: Session = Depends(get_db),
        user: User = Depends(require_roles(*BILLING_ROLES)),
):
    return list_invoices(db,
                         patient_id=_int_or_none(patient_id, "patient_id"),
                         is_paid=is_paid)


@router.get("/invoices/{invoice_id}", response_model=InvoiceOut)
def invoice_get(
        invoice_id: int,
        db: Session = Depends(get_db),
        user: User = Depends(require_roles(*BILLING_ROLES)),
):
    return get_invoice(db, invoice_id)


@router.post("/invoices/{invoice_id}/payments",
             response_model=PaymentResultOut,
             status_code=201)
def invoice_pay(
        invoice_id: int,
        payload: PaymentIn,
        db: Session = Depends(get_db),
        user: User = Depends(require_roles(UserRole.CASHIER)),
):
    with atomic(db, action="Record payment"):
        res = add_payment(db,
                          invoice_id=invoice_id,
                          amount=payload.amount,
                          cashier_id=user.id,
                          transaction_id=payload.transaction_id)
    return {"payment": res.payment, "invoice": get_invoice(db, res.invoice.id)}
