# FILE: app/schemas/appointment.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import DoctorMiniOut, PatientMiniOut
from app.schemas.price import PriceOut


class NewPatientIn(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class AppointmentCreate(BaseModel):
    doctor_id: Optional[int] = None
    appointment_date: Optional[datetime] = None
    reason: Optional[str] = Field(default=None, max_length=255)
    patient_id: Optional[int] = None
    patient: Optional[NewPatientIn] = None

    @field_validator("reason", mode="before")
    @classmethod
    def _strip_reason(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class LabRequestCreate(BaseModel):
    price_id: Optional[int] = None


class LabRequestBriefOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    price_id: int
    is_paid: bool
    status: str
    price: Optional[PriceOut] = None


class AppointmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    doctor_id: int
    appointment_date: datetime
    reason: Optional[str] = None
    is_paid: bool
    created_at: Optional[datetime] = None

    patient: Optional[PatientMiniOut] = None
    doctor: Optional[DoctorMiniOut] = None


class AppointmentDetailOut(AppointmentOut):
    lab_requests: List[LabRequestBriefOut] = []


class AppointmentBriefOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    doctor_id: int
    appointment_date: datetime
    patient: Optional[PatientMiniOut] = None
    doctor: Optional[DoctorMiniOut] = None


class LabRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    appointment_id: int
    requested_by_doctor_id: int
    price_id: int
    is_paid: bool
    status: str
    result: Optional[str] = None
    created_at: Optional[datetime] = None

    price: Optional[PriceOut] = None
    appointment: Optional[AppointmentBriefOut] = None
