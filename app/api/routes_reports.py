# FILE: app/api/routes_reports.py
from __future__ import annotations

import io
from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_roles
from app.models.user import User, UserRole
from app.schemas.reports import FinancialReportOut
from app.services.excel_export import build_financial_report_excel
from app.services.financial_report import financial_report

router = APIRouter()

report_roles = require_roles(UserRole.ACCOUNTANT, UserRole.ADMIN)

XLSX_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")


@router.get("/financial", response_model=FinancialReportOut)
def financial(
        db: Session = Depends(get_db),
        user: User = Depends(report_roles),
):
    return financial_report(db)


@router.get("/financial.xlsx")
def financial_xlsx(
        db: Session = Depends(get_db),
        user: User = Depends(report_roles),
):
    buf = io.BytesIO()
    build_financial_report_excel(buf, financial_report(db))
    buf.seek(0)

    filename = f"financial_report_{date.today().isoformat()}.xlsx"
    return StreamingResponse(
        buf,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
