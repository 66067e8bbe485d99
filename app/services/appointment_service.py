# FILE: app/services/appointment_service.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from app.models.appointment import Appointment
from app.models.doctor import Doctor
from app.models.lab import LabRequest
from app.models.patient import Patient
from app.services.billing_errors import InvalidAppointmentData
from app.services.billing_tx import atomic

logger = logging.getLogger(__name__)


def _resolve_patient(db: Session, patient_id: Optional[int],
                     patient: Optional[Dict[str, Any]]) -> int:
    if patient_id:
        if not db.get(Patient, int(patient_id)):
            raise InvalidAppointmentData(
                "Patient not found",
                details={
                    "patient_id":
                    "Existing patient id must reference a valid patient"
                },
            )
        return int(patient_id)

    if patient:
        name = (patient.get("name") or "").strip()
        email = (patient.get("email") or "").strip().lower()
        if not name or not email:
            raise InvalidAppointmentData(
                "Invalid patient object",
                details={
                    "patient": {
                        "required": ["name:string", "email:string"],
                        "optional": ["phone:string", "address:string"],
                    }
                },
            )
        existing = db.query(Patient).filter(Patient.email == email).first()
        if existing:
            return existing.id

        p = Patient(
            name=name,
            email=email,
            phone=patient.get("phone") or None,
            address=patient.get("address") or None,
        )
        db.add(p)
        db.flush()
        logger.info("Patient %s registered from appointment desk", p.id)
        return p.id

    raise InvalidAppointmentData(
        "Invalid request body",
        details={
            "one_of": ["patient_id:int", "patient:object with name and email"]
        },
    )


def create_appointment(
    db: Session,
    *,
    doctor_id: Optional[int],
    appointment_date: Optional[datetime],
    reason: Optional[str] = None,
    patient_id: Optional[int] = None,
    patient: Optional[Dict[str, Any]] = None,
) -> Appointment:
    """Cashier desk booking. New appointments are always unpaid."""
    if not doctor_id or not appointment_date:
        raise InvalidAppointmentData(
            "Invalid request body",
            details={
                "required": ["doctor_id:int", "appointment_date:ISO-8601"],
                "optional": ["reason:string", "patient_id:int OR patient:object"],
            },
        )

    with atomic(db, action="Create appointment"):
        if not db.get(Doctor, int(doctor_id)):
            raise InvalidAppointmentData("Doctor not found")

        pid = _resolve_patient(db, patient_id, patient)
        appt = Appointment(
            patient_id=pid,
            doctor_id=int(doctor_id),
            appointment_date=appointment_date,
            reason=(reason or None),
            is_paid=False,
        )
        db.add(appt)
        db.flush()

    db.refresh(appt)
    return appt


def list_appointments(db: Session,
                      *,
                      is_paid: Optional[bool] = None,
                      doctor_id: Optional[int] = None,
                      patient_id: Optional[int] = None) -> List[Appointment]:
    q = db.query(Appointment).options(
        selectinload(Appointment.patient),
        selectinload(Appointment.doctor),
        selectinload(Appointment.lab_requests).selectinload(LabRequest.price),
    )
    if is_paid is not None:
        q = q.filter(Appointment.is_paid.is_(bool(is_paid)))
    if doctor_id:
        q = q.filter(Appointment.doctor_id == int(doctor_id))
    if patient_id:
        q = q.filter(Appointment.patient_id == int(patient_id))
    return q.order_by(Appointment.created_at.desc(),
                      Appointment.id.desc()).all()


def list_lab_requests(db: Session,
                      *,
                      is_paid: Optional[bool] = None,
                      status: Optional[str] = None) -> List[LabRequest]:
    q = db.query(LabRequest).options(
        selectinload(LabRequest.price),
        selectinload(LabRequest.appointment).selectinload(
            Appointment.patient),
        selectinload(LabRequest.appointment).selectinload(Appointment.doctor),
    )
    if is_paid is not None:
        q = q.filter(LabRequest.is_paid.is_(bool(is_paid)))
    if status:
        q = q.filter(LabRequest.status == status.strip().upper())
    return q.order_by(LabRequest.created_at.desc(), LabRequest.id.desc()).all()
