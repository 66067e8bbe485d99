# FILE: app/models/billing.py
from __future__ import annotations

from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    Numeric,
    Boolean,
    DateTime,
    Index,
    ForeignKey,
)
from sqlalchemy.orm import relationship
from decimal import Decimal, ROUND_HALF_UP
from app.db.base import Base


class Invoice(Base):
    """
    Patient invoice.

    - total_amount is fixed at creation (sum of its items)
    - is_paid is recomputed only when a payment is recorded
    - items and payments are append-only
    """

    __tablename__ = "invoices"
    __table_args__ = (Index("ix_invoices_patient_paid", "patient_id",
                            "is_paid"), )

    id = Column(Integer, primary_key=True, index=True)

    patient_id = Column(
        Integer,
        ForeignKey("patients.id"),
        nullable=False,
        index=True,
    )

    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    is_paid = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    patient = relationship("Patient", back_populates="invoices")

    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.id",
    )
    payments = relationship(
        "Payment",
        back_populates="invoice",
        order_by="Payment.id",
    )

    # ---------- Billing math helpers ----------
    @staticmethod
    def _d(v) -> Decimal:
        if v is None:
            return Decimal("0")
        return Decimal(str(v))

    @staticmethod
    def _q2(v: Decimal) -> Decimal:
        return v.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    @property
    def items_total(self) -> Decimal:
        return self._q2(sum((self._d(i.amount) for i in self.items),
                            Decimal("0")))

    @property
    def amount_paid(self) -> Decimal:
        return self._q2(sum((self._d(p.amount) for p in self.payments),
                            Decimal("0")))

    @property
    def balance_due(self) -> Decimal:
        return self._q2(self._d(self.total_amount) - self.amount_paid)


class InvoiceItem(Base):
    __tablename__ = "invoice_items"
    __table_args__ = (Index("ix_invoice_items_invoice", "invoice_id"), )

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(
        Integer,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
    )

    description = Column(String(300), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)

    invoice = relationship("Invoice", back_populates="items")


class Payment(Base):
    """
    Ledger entry against one invoice. Never updated or deleted.
    cashier_id is a weak reference to the acting user.
    """

    __tablename__ = "payments"
    __table_args__ = (Index("ix_payments_invoice", "invoice_id"), )

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(
        Integer,
        ForeignKey("invoices.id"),
        nullable=False,
    )

    amount = Column(Numeric(12, 2), nullable=False)
    transaction_id = Column(String(100), unique=True, nullable=True)
    payment_date = Column(DateTime, default=datetime.utcnow)

    cashier_id = Column(Integer,
                        ForeignKey("users.id", ondelete="SET NULL"),
                        nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    invoice = relationship("Invoice", back_populates="payments")
    cashier = relationship("User")
