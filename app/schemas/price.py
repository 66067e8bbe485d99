# FILE: app/schemas/price.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.price import PriceType


class PriceCreate(BaseModel):
    type: PriceType
    code: str = Field(..., min_length=1, max_length=40)
    name: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., ge=0)
    active: Optional[bool] = True


class PriceUpdate(BaseModel):
    type: Optional[PriceType] = None
    code: Optional[str] = Field(default=None, max_length=40)
    name: Optional[str] = Field(default=None, max_length=255)
    amount: Optional[Decimal] = Field(default=None, ge=0)
    active: Optional[bool] = None


class PriceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    code: str
    name: str
    amount: Decimal
    active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
