# FILE: app/models/lab.py
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    Text,
    Index,
)
from sqlalchemy.orm import relationship

from app.db.base import Base


class LabStatus(str, Enum):
    REQUESTED = "REQUESTED"
    COMPLETED = "COMPLETED"


class LabRequest(Base):
    __tablename__ = "lab_requests"
    __table_args__ = (Index("ix_lab_requests_paid_status", "is_paid",
                            "status"), )

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(Integer,
                            ForeignKey("appointments.id"),
                            nullable=False,
                            index=True)
    requested_by_doctor_id = Column(Integer,
                                    ForeignKey("doctors.id"),
                                    nullable=False)

    # lab examination picked from the price catalog at request time
    price_id = Column(Integer,
                      ForeignKey("prices.id", ondelete="CASCADE"),
                      nullable=False)

    is_paid = Column(Boolean, nullable=False, default=False)
    status = Column(String(16),
                    nullable=False,
                    default=LabStatus.REQUESTED.value)
    result = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime,
                        default=datetime.utcnow,
                        onupdate=datetime.utcnow)

    appointment = relationship("Appointment", back_populates="lab_requests")
    requested_by_doctor = relationship("Doctor")
    price = relationship("Price")
