# FILE: app/models/price.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    Numeric,
    Index,
    UniqueConstraint,
)
from app.db.base import Base


class PriceType(str, Enum):
    APPOINTMENT = "APPOINTMENT"
    LAB = "LAB"


class Price(Base):
    """
    Billable item definition.

    APPOINTMENT: the consultation fee (one active row is the canonical fee)
    LAB: one row per lab examination, referenced by LabRequest.price_id

    Settled invoices copy `amount` into their items, so editing a price
    never changes past bills.
    """
    __tablename__ = "prices"
    __table_args__ = (
        UniqueConstraint("type", "code", name="uq_price_type_code"),
        Index("ix_prices_type_active", "type", "active"),
        {
            "mysql_engine": "InnoDB",
            "mysql_charset": "utf8mb4",
            "mysql_collate": "utf8mb4_unicode_ci",
        },
    )

    id = Column(Integer, primary_key=True, index=True)

    # APPOINTMENT | LAB
    type = Column(String(20), nullable=False, index=True)

    code = Column(String(40), nullable=False)
    name = Column(String(255), nullable=False)

    amount = Column(Numeric(12, 2), nullable=False, default=0)

    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime,
                        default=datetime.utcnow,
                        onupdate=datetime.utcnow,
                        nullable=False)
