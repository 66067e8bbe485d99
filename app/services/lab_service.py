# FILE: app/services/lab_service.py
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.models.appointment import Appointment
from app.models.doctor import Doctor
from app.models.lab import LabRequest, LabStatus
from app.models.price import Price, PriceType
from app.services.billing_errors import (
    Forbidden,
    InvalidLabRequest,
    NotFound,
)
from app.services.billing_tx import atomic

logger = logging.getLogger(__name__)


def create_lab_request(db: Session, *, appointment_id: int,
                       price_id: Optional[int], doctor_user_id: int) -> LabRequest:
    """
    Doctor orders a lab examination for one of their own appointments.
    The chosen catalog price stays linked to the request and is what
    settlement will charge.
    """
    if not price_id or int(price_id) <= 0:
        raise InvalidLabRequest(
            "Invalid request body",
            details={"required": ["price_id:int (positive)"]})

    doctor = db.query(Doctor).filter(Doctor.user_id == int(doctor_user_id)).first()
    if not doctor:
        raise NotFound("Doctor profile not found")

    appt = db.get(Appointment, int(appointment_id))
    if not appt:
        raise NotFound("Appointment not found")
    if appt.doctor_id != doctor.id:
        raise Forbidden("Not authorized to request lab for this appointment")

    price = db.get(Price, int(price_id))
    if not price:
        raise NotFound("Lab examination not found")
    if price.type != PriceType.LAB.value:
        raise InvalidLabRequest("Selected price is not a lab examination")
    if not price.active:
        raise InvalidLabRequest("Lab examination is not active")

    with atomic(db, action="Create lab request"):
        req = LabRequest(
            appointment_id=appt.id,
            requested_by_doctor_id=doctor.id,
            price_id=price.id,
            is_paid=False,
            status=LabStatus.REQUESTED.value,
        )
        db.add(req)
        db.flush()
        logger.info("Lab request %s created appointment_id=%s price=%s",
                    req.id, appt.id, price.code)

    db.refresh(req)
    return req
