# FILE: app/schemas/reports.py
from __future__ import annotations

from decimal import Decimal
from typing import List

from pydantic import BaseModel


class FinancialSummaryOut(BaseModel):
    total_revenue: Decimal
    pending_payments: Decimal
    invoice_count: int
    paid_invoice_count: int


class RevenuePointOut(BaseModel):
    name: str
    revenue: Decimal


class IncomeSourceOut(BaseModel):
    name: str
    value: Decimal
    color: str


class FinancialReportOut(BaseModel):
    summary: FinancialSummaryOut
    revenue_chart: List[RevenuePointOut]
    income_sources: List[IncomeSourceOut]
