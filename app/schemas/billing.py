# FILE: app/schemas/billing.py
from __future__ import annotations

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from decimal import Decimal

from app.schemas.appointment import AppointmentOut, LabRequestOut
from app.schemas.common import PatientMiniOut


class InvoiceItemIn(BaseModel):
    description: Optional[str] = None
    amount: Optional[Decimal] = None


class InvoiceCreate(BaseModel):
    """Shape checks only; the ledger service owns the business rules."""
    patient_id: Optional[int] = None
    items: Optional[List[InvoiceItemIn]] = None


class PaymentIn(BaseModel):
    amount: Optional[Decimal] = None
    transaction_id: Optional[str] = None


class InvoiceItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_id: int
    description: str
    amount: Decimal


class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_id: int
    amount: Decimal
    cashier_id: Optional[int] = None
    transaction_id: Optional[str] = None
    payment_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


class InvoiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    total_amount: Decimal
    is_paid: bool
    amount_paid: Decimal
    balance_due: Decimal
    created_at: Optional[datetime] = None

    patient: Optional[PatientMiniOut] = None
    items: List[InvoiceItemOut] = []
    payments: List[PaymentOut] = []


class PaymentResultOut(BaseModel):
    payment: PaymentOut
    invoice: InvoiceOut


class AppointmentSettlementOut(BaseModel):
    appointment: AppointmentOut
    invoice: InvoiceOut
    payment: PaymentOut


class LabRequestSettlementOut(BaseModel):
    lab_request: LabRequestOut
    invoice: InvoiceOut
    payment: PaymentOut
