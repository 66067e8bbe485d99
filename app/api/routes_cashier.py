# FILE: app/api/routes_cashier.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_roles
from app.models.user import User, UserRole
from app.schemas.appointment import (
    AppointmentCreate,
    AppointmentDetailOut,
    LabRequestOut,
)
from app.schemas.billing import (
    AppointmentSettlementOut,
    LabRequestSettlementOut,
)
from app.services.appointment_service import (
    create_appointment,
    list_appointments,
    list_lab_requests,
)
from app.services.billing_ledger import get_invoice
from app.services.settlement import settle_appointment, settle_lab_request

router = APIRouter()

cashier_only = require_roles(UserRole.CASHIER)


def _positive_id(raw: str, label: str) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        value = 0
    if value <= 0:
        raise HTTPException(status_code=400, detail=f"Invalid {label} id")
    return value


@router.post("/appointments",
             response_model=AppointmentDetailOut,
             status_code=201)
def appointment_create(
        payload: AppointmentCreate,
        db: Session = Depends(get_db),
        user: User = Depends(cashier_only),
):
    return create_appointment(
        db,
        doctor_id=payload.doctor_id,
        appointment_date=payload.appointment_date,
        reason=payload.reason,
        patient_id=payload.patient_id,
        patient=payload.patient.model_dump() if payload.patient else None,
    )


@router.get("/appointments", response_model=List[AppointmentDetailOut])
def appointment_list(
        is_paid: Optional[bool] = Query(None),
        doctor_id: Optional[int] = Query(None),
        patient_id: Optional[int] = Query(None),
        db: Session = Depends(get_db),
        user: User = Depends(cashier_only),
):
    return list_appointments(db,
                             is_paid=is_paid,
                             doctor_id=doctor_id,
                             patient_id=patient_id)


@router.post("/appointments/{appointment_id}/pay",
             response_model=AppointmentSettlementOut)
def appointment_pay(
        appointment_id: str,
        db: Session = Depends(get_db),
        user: User = Depends(cashier_only),
):
    appointment_id = _positive_id(appointment_id, "appointment")
    res = settle_appointment(db, appointment_id, cashier_id=user.id)
    return {
        "appointment": res.event,
        "invoice": get_invoice(db, res.invoice.id),
        "payment": res.payment,
    }


@router.get("/lab-requests", response_model=List[LabRequestOut])
def lab_request_list(
        is_paid: Optional[bool] = Query(None),
        status: Optional[str] = Query(None),
        db: Session = Depends(get_db),
        user: User = Depends(cashier_only),
):
    return list_lab_requests(db, is_paid=is_paid, status=status)


@router.post("/lab-requests/{lab_request_id}/pay",
             response_model=LabRequestSettlementOut)
def lab_request_pay(
        lab_request_id: str,
        db: Session = Depends(get_db),
        user: User = Depends(cashier_only),
):
    lab_request_id = _positive_id(lab_request_id, "lab request")
    res = settle_lab_request(db, lab_request_id, cashier_id=user.id)
    return {
        "lab_request": res.event,
        "invoice": get_invoice(db, res.invoice.id),
        "payment": res.payment,
    }
