# FILE: app/schemas/common.py
from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, ConfigDict


class PatientMiniOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None


class DoctorMiniOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    specialty: Optional[str] = None
