from decimal import Decimal

import pytest
from openpyxl import load_workbook
import io

from app.models import PriceType, UserRole


@pytest.fixture
def cashier(make_user):
    return make_user(UserRole.CASHIER)


@pytest.fixture
def setup_appointment(make_patient, make_doctor, make_appointment, make_price):
    patient = make_patient(name="Ann")
    doctor = make_doctor(name="Dr. Lee")
    make_price(PriceType.APPOINTMENT, amount="50")
    return make_appointment(patient, doctor)


def test_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "running" in r.json()["message"]


def test_requires_token(client):
    r = client.post("/api/cashier/appointments/1/pay")
    assert r.status_code == 401
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Authentication required"


def test_rejects_bad_token(client):
    r = client.get("/api/billing/invoices",
                   headers={"Authorization": "Bearer nope"})
    assert r.status_code == 401


def test_wrong_role_is_forbidden(client, make_user, auth_header):
    doctor_user = make_user(UserRole.DOCTOR)
    r = client.post("/api/cashier/appointments/1/pay",
                    headers=auth_header(doctor_user))
    assert r.status_code == 403
    assert r.json()["message"] == "Access denied"


def test_pay_appointment(client, cashier, auth_header, setup_appointment):
    r = client.post(f"/api/cashier/appointments/{setup_appointment.id}/pay",
                    headers=auth_header(cashier))
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["appointment"]["id"] == setup_appointment.id
    assert body["appointment"]["is_paid"] is True
    assert body["invoice"]["is_paid"] is True
    assert Decimal(body["invoice"]["total_amount"]) == Decimal("50")
    assert [i["description"] for i in body["invoice"]["items"]
            ] == ["Appointment with Dr. Lee"]
    assert Decimal(body["payment"]["amount"]) == Decimal("50")
    assert body["payment"]["cashier_id"] == cashier.id

    again = client.post(
        f"/api/cashier/appointments/{setup_appointment.id}/pay",
        headers=auth_header(cashier))
    assert again.status_code == 400
    assert again.json()["code"] == "ALREADY_PAID"


def test_pay_unknown_appointment(client, cashier, auth_header):
    r = client.post("/api/cashier/appointments/999/pay",
                    headers=auth_header(cashier))
    assert r.status_code == 404
    assert r.json() == {
        "success": False,
        "message": "Appointment not found",
        "code": "NOT_FOUND",
    }


def test_pay_non_positive_id(client, cashier, auth_header):
    r = client.post("/api/cashier/appointments/0/pay",
                    headers=auth_header(cashier))
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid appointment id"

    r = client.post("/api/cashier/appointments/abc/pay",
                    headers=auth_header(cashier))
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid appointment id"

    r = client.post("/api/cashier/lab-requests/-3/pay",
                    headers=auth_header(cashier))
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid lab request id"


def test_pay_without_pricing(client, cashier, auth_header, make_patient,
                             make_doctor, make_appointment):
    appt = make_appointment(make_patient(), make_doctor())
    r = client.post(f"/api/cashier/appointments/{appt.id}/pay",
                    headers=auth_header(cashier))
    assert r.status_code == 500
    assert r.json()["code"] == "PRICING_NOT_CONFIGURED"

    listed = client.get("/api/cashier/appointments?is_paid=false",
                        headers=auth_header(cashier))
    assert [a["id"] for a in listed.json()] == [appt.id]


def test_doctor_orders_lab_and_cashier_settles(client, make_user, make_patient,
                                               make_doctor, make_appointment,
                                               make_price, auth_header,
                                               cashier):
    doc_user = make_user(UserRole.DOCTOR)
    doctor = make_doctor(user=doc_user)
    appt = make_appointment(make_patient(), doctor)
    glucose = make_price(PriceType.LAB, amount="20", name="Glucose Test")

    exams = client.get("/api/lab/examinations", headers=auth_header(doc_user))
    assert [e["name"] for e in exams.json()] == ["Glucose Test"]

    created = client.post(f"/api/lab/appointments/{appt.id}/lab-requests",
                          json={"price_id": glucose.id},
                          headers=auth_header(doc_user))
    assert created.status_code == 201, created.text
    req = created.json()
    assert req["is_paid"] is False
    assert req["status"] == "REQUESTED"

    pending = client.get("/api/cashier/lab-requests?is_paid=false",
                         headers=auth_header(cashier))
    assert [r["id"] for r in pending.json()] == [req["id"]]

    paid = client.post(f"/api/cashier/lab-requests/{req['id']}/pay",
                       headers=auth_header(cashier))
    assert paid.status_code == 200, paid.text
    body = paid.json()
    assert body["lab_request"]["is_paid"] is True
    assert body["invoice"]["items"][0]["description"] == "Lab Test: Glucose Test"


def test_doctor_cannot_order_for_other_doctors_appointment(
        client, make_user, make_patient, make_doctor, make_appointment,
        make_price, auth_header):
    me = make_user(UserRole.DOCTOR)
    make_doctor(user=me)
    other = make_doctor(name="Dr. Other")
    appt = make_appointment(make_patient(), other)
    price = make_price(PriceType.LAB)

    r = client.post(f"/api/lab/appointments/{appt.id}/lab-requests",
                    json={"price_id": price.id},
                    headers=auth_header(me))
    assert r.status_code == 403
    assert r.json()["code"] == "FORBIDDEN"


def test_lab_request_rejects_non_lab_price(client, make_user, make_patient,
                                           make_doctor, make_appointment,
                                           make_price, auth_header):
    me = make_user(UserRole.DOCTOR)
    appt = make_appointment(make_patient(), make_doctor(user=me))
    fee = make_price(PriceType.APPOINTMENT)

    r = client.post(f"/api/lab/appointments/{appt.id}/lab-requests",
                    json={"price_id": fee.id},
                    headers=auth_header(me))
    assert r.status_code == 400
    assert r.json()["code"] == "INVALID_LAB_REQUEST"


def test_cashier_books_appointment_for_new_patient(client, cashier,
                                                   auth_header, make_doctor):
    doctor = make_doctor()
    payload = {
        "doctor_id": doctor.id,
        "appointment_date": "2026-04-01T09:00:00",
        "reason": "  Fever ",
        "patient": {
            "name": "Carl",
            "email": "Carl@Mail.test"
        },
    }
    r = client.post("/api/cashier/appointments",
                    json=payload,
                    headers=auth_header(cashier))
    assert r.status_code == 201, r.text
    first = r.json()
    assert first["is_paid"] is False
    assert first["reason"] == "Fever"
    assert first["patient"]["email"] == "carl@mail.test"

    # same email reuses the patient
    r = client.post("/api/cashier/appointments",
                    json=payload,
                    headers=auth_header(cashier))
    assert r.json()["patient_id"] == first["patient_id"]


def test_booking_requires_doctor_and_patient(client, cashier, auth_header,
                                             make_doctor):
    r = client.post("/api/cashier/appointments",
                    json={"appointment_date": "2026-04-01T09:00:00"},
                    headers=auth_header(cashier))
    assert r.status_code == 400
    assert r.json()["code"] == "INVALID_APPOINTMENT_DATA"

    r = client.post("/api/cashier/appointments",
                    json={
                        "doctor_id": make_doctor().id,
                        "appointment_date": "2026-04-01T09:00:00",
                    },
                    headers=auth_header(cashier))
    assert r.status_code == 400


def test_manual_invoice_and_payments(client, make_user, make_patient,
                                     auth_header, cashier):
    accountant = make_user(UserRole.ACCOUNTANT)
    patient = make_patient()

    r = client.post("/api/billing/invoices",
                    json={
                        "patient_id": patient.id,
                        "items": [{
                            "description": "Dressing",
                            "amount": 30
                        }, {
                            "description": "Injection",
                            "amount": "20.50"
                        }],
                    },
                    headers=auth_header(accountant))
    assert r.status_code == 201, r.text
    inv = r.json()
    assert Decimal(inv["total_amount"]) == Decimal("50.50")
    assert inv["is_paid"] is False

    # accountants may not take money
    r = client.post(f"/api/billing/invoices/{inv['id']}/payments",
                    json={"amount": 10},
                    headers=auth_header(accountant))
    assert r.status_code == 403

    r = client.post(f"/api/billing/invoices/{inv['id']}/payments",
                    json={"amount": 60},
                    headers=auth_header(cashier))
    assert r.status_code == 400
    assert r.json()["code"] == "PAYMENT_EXCEEDS_DUE"
    assert r.json()["details"]["due"] == "50.50"

    r = client.post(f"/api/billing/invoices/{inv['id']}/payments",
                    json={"amount": -1},
                    headers=auth_header(cashier))
    assert r.json()["code"] == "INVALID_PAYMENT_DATA"

    r = client.post(f"/api/billing/invoices/{inv['id']}/payments",
                    json={"amount": "50.50"},
                    headers=auth_header(cashier))
    assert r.status_code == 201
    assert r.json()["invoice"]["is_paid"] is True
    assert Decimal(r.json()["invoice"]["balance_due"]) == Decimal("0")

    listed = client.get(f"/api/billing/invoices?patient_id={patient.id}",
                        headers=auth_header(accountant)).json()
    assert [i["id"] for i in listed] == [inv["id"]]
    assert len(listed[0]["payments"]) == 1

    # a garbage patient filter is ignored, not rejected
    r = client.get("/api/billing/invoices?patient_id=abc&is_paid=true",
                   headers=auth_header(accountant))
    assert [i["id"] for i in r.json()] == [inv["id"]]

    r = client.get("/api/billing/invoices/9999",
                   headers=auth_header(accountant))
    assert r.status_code == 404


def test_invoice_validation(client, make_user, make_patient, auth_header):
    accountant = make_user(UserRole.ACCOUNTANT)
    r = client.post("/api/billing/invoices",
                    json={"patient_id": 1, "items": []},
                    headers=auth_header(accountant))
    assert r.status_code == 400
    assert r.json()["code"] == "INVALID_INVOICE_DATA"

    r = client.post("/api/billing/invoices",
                    json={
                        "patient_id": make_patient().id,
                        "items": [{
                            "description": "Free check",
                            "amount": 0
                        }]
                    },
                    headers=auth_header(accountant))
    assert r.status_code == 400
    assert r.json()["code"] == "INVALID_INVOICE_DATA"
    assert r.json()["details"] == {"total_amount": "0.00"}

    r = client.post("/api/billing/invoices",
                    json={"patient_id": "one"},
                    headers=auth_header(accountant))
    assert r.status_code == 422
    body = r.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["details"][0]["loc"][-1] == "patient_id"


def test_price_admin_crud(client, make_user, auth_header):
    admin = make_user(UserRole.ADMIN)
    h = auth_header(admin)

    r = client.post("/api/prices",
                    json={
                        "type": "LAB",
                        "code": "GLU",
                        "name": "Glucose Test",
                        "amount": "20"
                    },
                    headers=h)
    assert r.status_code == 201, r.text
    price = r.json()
    assert price["active"] is True

    dup = client.post("/api/prices",
                      json={
                          "type": "LAB",
                          "code": "GLU",
                          "name": "Again",
                          "amount": "1"
                      },
                      headers=h)
    assert dup.status_code == 409
    assert dup.json()["code"] == "PRICE_CONFLICT"

    r = client.patch(f"/api/prices/{price['id']}",
                     json={"amount": "22.5"},
                     headers=h)
    assert Decimal(r.json()["amount"]) == Decimal("22.50")
    assert r.json()["name"] == "Glucose Test"

    r = client.get("/api/prices?type=LAB", headers=h)
    assert [p["id"] for p in r.json()] == [price["id"]]

    r = client.delete(f"/api/prices/{price['id']}", headers=h)
    assert r.json()["success"] is True
    assert client.get(f"/api/prices/{price['id']}",
                      headers=h).status_code == 404


def test_financial_report_endpoints(client, make_user, auth_header, cashier,
                                    setup_appointment):
    client.post(f"/api/cashier/appointments/{setup_appointment.id}/pay",
                headers=auth_header(cashier))
    accountant = make_user(UserRole.ACCOUNTANT)

    r = client.get("/api/reports/financial", headers=auth_header(accountant))
    assert r.status_code == 200
    body = r.json()
    assert Decimal(body["summary"]["total_revenue"]) == Decimal("50")
    assert Decimal(body["summary"]["pending_payments"]) == Decimal("0")
    assert body["summary"]["paid_invoice_count"] == 1
    assert body["income_sources"][0]["name"] == "Appointment with Dr. Lee"

    r = client.get("/api/reports/financial.xlsx",
                   headers=auth_header(accountant))
    assert r.status_code == 200
    assert "attachment" in r.headers["content-disposition"]
    wb = load_workbook(io.BytesIO(r.content))
    assert "Summary" in wb.sheetnames

    r = client.get("/api/reports/financial", headers=auth_header(cashier))
    assert r.status_code == 403
