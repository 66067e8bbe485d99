# FILE: app/services/settlement.py
"""
Settlement: turn an unpaid clinical event (appointment or lab request)
into a paid invoice.

One unit of work per call:
  1. load + lock the event row
  2. reject if already paid
  3. resolve the price
  4. flip is_paid with a conditional UPDATE (false -> true)
  5. create invoice with one item
  6. record one full payment by the acting cashier

Any failure rolls the whole unit back, so an event is observed either
unpaid with no invoice or paid with a fully paid invoice.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Type

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from app.models.appointment import Appointment
from app.models.billing import Invoice, Payment
from app.models.lab import LabRequest
from app.models.price import Price, PriceType
from app.services.billing_errors import (
    AlreadyPaid,
    NotFound,
    PricingNotConfigured,
)
from app.services.billing_ledger import create_invoice
from app.services.billing_math import money2
from app.services.billing_payment_service import add_payment
from app.services.billing_tx import atomic
from app.services.price_catalog import resolve_active_price

logger = logging.getLogger(__name__)


@dataclass
class SettlementResult:
    kind: str
    event: Any
    invoice: Invoice
    payment: Payment


class SettlementTarget:
    """
    What the orchestrator needs to know about a billable event type.
    Subclasses differ only in how they find the patient, the price and
    the invoice line text.
    """
    kind = "event"
    label = "Event"
    model: Type[Any]

    def load(self, db: Session, event_id: int):
        # FOR UPDATE holds the row until commit; populate_existing drops any
        # copy this session already had so is_paid is re-read under the lock
        return (db.query(self.model).filter(self.model.id == int(event_id)).
                with_for_update().populate_existing().first())

    def patient_id(self, event) -> int:
        raise NotImplementedError

    def resolve_price(self, db: Session, event) -> Price:
        raise NotImplementedError

    def describe_line_item(self, event, price: Price) -> str:
        raise NotImplementedError

    def mark_paid(self, db: Session, event) -> bool:
        """
        Compare-and-set on the paid flag. Returns False when another
        transaction got there first.
        """
        now = datetime.utcnow()
        n = (db.query(self.model).filter(
            self.model.id == event.id,
            self.model.is_paid.is_(False)).update(
                {
                    self.model.is_paid: True,
                    self.model.updated_at: now
                },
                synchronize_session=False,
            ))
        if n != 1:
            return False
        set_committed_value(event, "is_paid", True)
        set_committed_value(event, "updated_at", now)
        return True


class AppointmentTarget(SettlementTarget):
    kind = "appointment"
    label = "Appointment"
    model = Appointment

    def patient_id(self, event: Appointment) -> int:
        return event.patient_id

    def resolve_price(self, db: Session, event: Appointment) -> Price:
        try:
            return resolve_active_price(db, PriceType.APPOINTMENT)
        except PricingNotConfigured:
            raise PricingNotConfigured(
                "Payment failed: Appointment pricing is not configured.") from None

    def describe_line_item(self, event: Appointment, price: Price) -> str:
        doctor = getattr(event.doctor, "name", None) or f"doctor #{event.doctor_id}"
        return f"Appointment with {doctor}"


class LabRequestTarget(SettlementTarget):
    kind = "lab_request"
    label = "Lab request"
    model = LabRequest

    def patient_id(self, event: LabRequest) -> int:
        return event.appointment.patient_id

    def resolve_price(self, db: Session, event: LabRequest) -> Price:
        # the examination was chosen when the doctor ordered it
        if not event.price:
            raise PricingNotConfigured(
                "Payment failed: Lab request price is not configured.")
        return event.price

    def describe_line_item(self, event: LabRequest, price: Price) -> str:
        return f"Lab Test: {price.name}"


APPOINTMENT = AppointmentTarget()
LAB_REQUEST = LabRequestTarget()


def settle(db: Session, target: SettlementTarget, event_id: int, *,
           cashier_id: Optional[int]) -> SettlementResult:
    tag = f"settle_{target.kind}"
    logger.info("[%s] Starting transaction for %s ID: %s", tag, target.kind,
                event_id)

    with atomic(db, action=f"{target.label} payment"):
        event = target.load(db, event_id)
        if not event:
            raise NotFound(f"{target.label} not found")
        if event.is_paid:
            raise AlreadyPaid(f"{target.label} is already paid")

        price = target.resolve_price(db, event)
        amount = money2(price.amount)
        if amount <= 0:
            raise PricingNotConfigured(
                f"Payment failed: {target.label} price has no chargeable amount.")
        logger.info("[%s] Found price: %s (%s)", tag, amount, price.code)

        if not target.mark_paid(db, event):
            raise AlreadyPaid(f"{target.label} is already paid")
        logger.info("[%s] Marked %s %s as paid.", tag, target.kind, event.id)

        invoice = create_invoice(
            db,
            patient_id=target.patient_id(event),
            items=[{
                "description": target.describe_line_item(event, price),
                "amount": amount,
            }],
        )
        logger.info("[%s] Created invoice ID: %s", tag, invoice.id)

        res = add_payment(db,
                          invoice_id=invoice.id,
                          amount=amount,
                          cashier_id=cashier_id)
        logger.info("[%s] Added payment %s to invoice ID: %s", tag,
                    res.payment.id, invoice.id)

    logger.info("[%s] Transaction successful for %s ID: %s", tag, target.kind,
                event_id)
    return SettlementResult(kind=target.kind,
                            event=event,
                            invoice=res.invoice,
                            payment=res.payment)


def settle_appointment(db: Session, appointment_id: int, *,
                       cashier_id: Optional[int]) -> SettlementResult:
    return settle(db, APPOINTMENT, appointment_id, cashier_id=cashier_id)


def settle_lab_request(db: Session, lab_request_id: int, *,
                       cashier_id: Optional[int]) -> SettlementResult:
    return settle(db, LAB_REQUEST, lab_request_id, cashier_id=cashier_id)
