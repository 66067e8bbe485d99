# FILE: app/services/billing_errors.py
from __future__ import annotations

from typing import Any, Optional


class BillingError(Exception):
    """
    Base for every classified failure raised by the billing services.

    `code` is stable and machine readable; the API layer maps
    `status_code` to the HTTP status.
    """
    code = "BILLING_ERROR"
    status_code = 400

    def __init__(self,
                 msg: str,
                 status_code: Optional[int] = None,
                 details: Any = None):
        super().__init__(msg)
        self.msg = msg
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class NotFound(BillingError):
    code = "NOT_FOUND"
    status_code = 404


class AlreadyPaid(BillingError):
    code = "ALREADY_PAID"
    status_code = 400


class PricingNotConfigured(BillingError):
    code = "PRICING_NOT_CONFIGURED"
    status_code = 500


class InvalidInvoiceData(BillingError):
    code = "INVALID_INVOICE_DATA"
    status_code = 400


class InvalidPaymentData(BillingError):
    code = "INVALID_PAYMENT_DATA"
    status_code = 400


class PaymentExceedsDue(BillingError):
    code = "PAYMENT_EXCEEDS_DUE"
    status_code = 400


class PersistenceFailure(BillingError):
    code = "PERSISTENCE_FAILURE"
    status_code = 500


class InvalidPriceData(BillingError):
    code = "INVALID_PRICE_DATA"
    status_code = 400


class PriceConflict(BillingError):
    code = "PRICE_CONFLICT"
    status_code = 409


class InvalidLabRequest(BillingError):
    code = "INVALID_LAB_REQUEST"
    status_code = 400


class InvalidAppointmentData(BillingError):
    code = "INVALID_APPOINTMENT_DATA"
    status_code = 400


class Forbidden(BillingError):
    code = "FORBIDDEN"
    status_code = 403
