from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from openpyxl import Workbook
from openpyxl.utils import get_column_letter


def _money(x) -> float:
    try:
        return float(Decimal(str(x or "0")))
    except Exception:
        return 0.0


def _autosize(ws, ncols: int, width: int = 22) -> None:
    for col in range(1, ncols + 1):
        ws.column_dimensions[get_column_letter(col)].width = width


def build_financial_report_excel(fp, report: Dict[str, Any]):
    wb = Workbook()

    ws = wb.active
    ws.title = "Summary"
    summary = report.get("summary", {})
    ws.append(["Metric", "Value"])
    ws.append(["Total Revenue", _money(summary.get("total_revenue"))])
    ws.append(["Pending Payments", _money(summary.get("pending_payments"))])
    ws.append(["Invoices", int(summary.get("invoice_count") or 0)])
    ws.append(["Paid Invoices", int(summary.get("paid_invoice_count") or 0)])
    _autosize(ws, 2)

    ws = wb.create_sheet("Daily Revenue")
    ws.append(["Date", "Revenue"])
    for r in report.get("revenue_chart", []):
        ws.append([r["name"], _money(r["revenue"])])
    _autosize(ws, 2)

    ws = wb.create_sheet("Income Sources")
    ws.append(["Source", "Amount"])
    for r in report.get("income_sources", []):
        ws.append([r["name"], _money(r["value"])])
    _autosize(ws, 2, width=40)

    wb.save(fp)
