# app/models/doctor.py
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(191), unique=True, nullable=False)
    specialty = Column(String(120), nullable=False)

    # login account of the doctor (optional until linked by admin)
    user_id = Column(Integer,
                     ForeignKey("users.id", ondelete="SET NULL"),
                     unique=True,
                     nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime,
                        default=datetime.utcnow,
                        onupdate=datetime.utcnow)

    user = relationship("User")
    appointments = relationship("Appointment", back_populates="doctor")
