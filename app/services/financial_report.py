# FILE: app/services/financial_report.py
from __future__ import annotations

from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.billing import Invoice, InvoiceItem, Payment
from app.services.billing_math import D, money2

D0 = Decimal("0.00")

INCOME_COLORS = [
    "#2563eb", "#059669", "#d97706", "#be185d", "#1e40af", "#166534",
    "#b45309", "#831843"
]


def total_revenue(db: Session) -> Decimal:
    """Revenue is what was collected: sum of all payment rows."""
    s = db.query(func.coalesce(func.sum(Payment.amount), 0)).scalar()
    return money2(D(s))


def pending_payments(db: Session) -> Decimal:
    """Outstanding balance across unpaid invoices (total minus collected)."""
    billed = (db.query(func.coalesce(func.sum(Invoice.total_amount), 0)).filter(
        Invoice.is_paid.is_(False)).scalar())
    collected = (db.query(func.coalesce(func.sum(Payment.amount), 0)).join(
        Invoice, Invoice.id == Payment.invoice_id).filter(
            Invoice.is_paid.is_(False)).scalar())
    return money2(D(billed) - D(collected))


def revenue_by_day(db: Session) -> List[Dict[str, Any]]:
    rows = (db.query(Payment.amount, Payment.created_at).order_by(
        Payment.created_at.asc(), Payment.id.asc()).all())

    daily: "OrderedDict[str, Decimal]" = OrderedDict()
    for amount, created_at in rows:
        if not created_at:
            continue
        day = created_at.date().isoformat()
        daily[day] = daily.get(day, D0) + D(amount)

    return [{"name": day, "revenue": money2(v)} for day, v in daily.items()]


def income_sources(db: Session) -> List[Dict[str, Any]]:
    rows = (db.query(InvoiceItem.description, InvoiceItem.amount).order_by(
        InvoiceItem.id.asc()).all())

    by_desc: "OrderedDict[str, Decimal]" = OrderedDict()
    for desc, amount in rows:
        by_desc[desc] = by_desc.get(desc, D0) + D(amount)

    out = []
    for idx, (desc, v) in enumerate(by_desc.items()):
        out.append({
            "name": desc,
            "value": money2(v),
            "color": INCOME_COLORS[idx % len(INCOME_COLORS)],
        })
    return out


def financial_report(db: Session) -> Dict[str, Any]:
    invoice_count = db.query(func.count(Invoice.id)).scalar() or 0
    paid_count = (db.query(func.count(Invoice.id)).filter(
        Invoice.is_paid.is_(True)).scalar() or 0)

    return {
        "summary": {
            "total_revenue": total_revenue(db),
            "pending_payments": pending_payments(db),
            "invoice_count": int(invoice_count),
            "paid_invoice_count": int(paid_count),
        },
        "revenue_chart": revenue_by_day(db),
        "income_sources": income_sources(db),
    }
