# app/models/__init__.py
from .user import User, UserRole
from .patient import Patient
from .doctor import Doctor
from .appointment import Appointment
from .lab import LabRequest, LabStatus
from .price import Price, PriceType
from .billing import Invoice, InvoiceItem, Payment
__all__ = [
    "User",
    "UserRole",
    "Patient",
    "Doctor",
    "Appointment",
    "LabRequest",
    "LabStatus",
    "Price",
    "PriceType",
    "Invoice",
    "InvoiceItem",
    "Payment",
]
