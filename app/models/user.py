from datetime import datetime
from enum import Enum

from sqlalchemy import Column, Integer, String, DateTime
from app.db.base import Base


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    CASHIER = "CASHIER"
    DOCTOR = "DOCTOR"
    LABRATORY = "LABRATORY"
    PHARMACY = "PHARMACY"
    ACCOUNTANT = "ACCOUNTANT"


class User(Base):
    __tablename__ = "users"
    __table_args__ = {
        "mysql_engine": "InnoDB",
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(191), unique=True,
                   nullable=False)  # <= 191, no index=True
    password_hash = Column(String(255), nullable=False)

    # ADMIN | CASHIER | DOCTOR | LABRATORY | PHARMACY | ACCOUNTANT
    role = Column(String(20), nullable=False, default=UserRole.CASHIER.value)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime,
                        default=datetime.utcnow,
                        onupdate=datetime.utcnow)
