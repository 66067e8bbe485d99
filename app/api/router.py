# app/api/router.py
from fastapi import APIRouter
from app.api import (
    routes_billing,
    routes_cashier,
    routes_lab,
    routes_prices,
    routes_reports,
)

api_router = APIRouter()

# ---- Catalog
api_router.include_router(routes_prices.router,
                          prefix="/prices",
                          tags=["prices"])

# ---- Front desk / lab
api_router.include_router(routes_cashier.router,
                          prefix="/cashier",
                          tags=["cashier"])
api_router.include_router(routes_lab.router, prefix="/lab", tags=["lab"])

# ---- Billing / reports
api_router.include_router(routes_billing.router,
                          prefix="/billing",
                          tags=["billing"])
api_router.include_router(routes_reports.router,
                          prefix="/reports",
                          tags=["reports"])
