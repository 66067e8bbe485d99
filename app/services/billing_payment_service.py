# FILE: app/services/billing_payment_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.billing import Invoice, Payment
from app.services.billing_errors import (
    InvalidPaymentData,
    NotFound,
    PaymentExceedsDue,
)
from app.services.billing_math import D, money2, parse_amount

logger = logging.getLogger(__name__)


@dataclass
class PaymentResult:
    payment: Payment
    invoice: Invoice


def paid_total(db: Session, invoice_id: int) -> Decimal:
    s = (db.query(func.coalesce(func.sum(Payment.amount), 0)).filter(
        Payment.invoice_id == int(invoice_id)).scalar())
    return money2(D(s))


def add_payment(
    db: Session,
    *,
    invoice_id: Optional[int],
    amount: Any,
    cashier_id: Optional[int] = None,
    transaction_id: Optional[str] = None,
) -> PaymentResult:
    """
    Append one payment to an invoice inside the caller's transaction.

    The invoice row is locked first so concurrent payments on the same
    invoice are serialized. Overpayment is rejected, never clamped.
    This is the only place Invoice.is_paid is written.
    """
    amt = parse_amount(amount)
    if amt is None or amt <= 0 or not invoice_id:
        raise InvalidPaymentData(
            "Invalid payment data",
            details={"required": ["amount:number (positive)"]},
        )

    inv = (db.query(Invoice).filter(Invoice.id == int(invoice_id)).
           with_for_update().populate_existing().first())
    if not inv:
        raise NotFound("Invoice not found")

    total = money2(inv.total_amount)
    already = paid_total(db, inv.id)
    new_total_paid = money2(already + amt)

    if new_total_paid > total:
        raise PaymentExceedsDue(
            "Payment exceeds amount due",
            details={
                "total_amount": str(total),
                "paid": str(already),
                "due": str(money2(total - already)),
                "got": str(amt),
            },
        )

    pay = Payment(
        invoice_id=inv.id,
        amount=amt,
        cashier_id=cashier_id,
        transaction_id=(transaction_id or None),
    )
    db.add(pay)
    inv.is_paid = new_total_paid >= total
    db.flush()
    db.refresh(inv)

    logger.info("Payment %s recorded invoice_id=%s amount=%s paid=%s/%s",
                pay.id, inv.id, amt, new_total_paid, total)
    return PaymentResult(payment=pay, invoice=inv)
