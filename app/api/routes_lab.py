# FILE: app/api/routes_lab.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_roles
from app.models.user import User, UserRole
from app.schemas.appointment import LabRequestCreate, LabRequestOut
from app.schemas.price import PriceOut
from app.services.lab_service import create_lab_request
from app.services.price_catalog import list_lab_examinations

router = APIRouter()


@router.get("/examinations", response_model=List[PriceOut])
def examinations(
        db: Session = Depends(get_db),
        user: User = Depends(require_roles(UserRole.DOCTOR, UserRole.ADMIN)),
):
    return list_lab_examinations(db)


@router.post("/appointments/{appointment_id}/lab-requests",
             response_model=LabRequestOut,
             status_code=201)
def lab_request_create(
        appointment_id: int,
        payload: LabRequestCreate,
        db: Session = Depends(get_db),
        user: User = Depends(require_roles(UserRole.DOCTOR)),
):
    return create_lab_request(db,
                              appointment_id=appointment_id,
                              price_id=payload.price_id,
                              doctor_user_id=user.id)
