import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.api.deps import get_db  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.main import app  # noqa: E402
from app.models import (  # noqa: E402
    Appointment, Doctor, LabRequest, Patient, Price, PriceType, User,
    UserRole)
from app.utils.jwt import create_access_token  # noqa: E402


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False,
                        future=True)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client(session_factory):

    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------
# factories
# ---------------------------------------------------------------------
@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=UserRole.CASHIER, email=None, **kw):
        counter["n"] += 1
        role = getattr(role, "value", role)
        u = User(email=email or f"{role.lower()}{counter['n']}@clinic.test",
                 password_hash="x",
                 role=role,
                 **kw)
        db.add(u)
        db.commit()
        db.refresh(u)
        return u

    return _make


@pytest.fixture
def make_patient(db):
    counter = {"n": 0}

    def _make(name="Jane Doe", email=None, **kw):
        counter["n"] += 1
        p = Patient(name=name,
                    email=email or f"patient{counter['n']}@mail.test",
                    **kw)
        db.add(p)
        db.commit()
        db.refresh(p)
        return p

    return _make


@pytest.fixture
def make_doctor(db):
    counter = {"n": 0}

    def _make(name="Dr. Lee", user=None, email=None, specialty="General",
              **kw):
        counter["n"] += 1
        d = Doctor(name=name,
                   email=email or f"doctor{counter['n']}@clinic.test",
                   specialty=specialty,
                   user_id=user.id if user else None,
                   **kw)
        db.add(d)
        db.commit()
        db.refresh(d)
        return d

    return _make


@pytest.fixture
def make_appointment(db):

    def _make(patient, doctor, appointment_date=None, reason="Checkup",
              is_paid=False, **kw):
        a = Appointment(patient_id=patient.id,
                        doctor_id=doctor.id,
                        appointment_date=appointment_date
                        or datetime(2026, 3, 2, 10, 0),
                        reason=reason,
                        is_paid=is_paid,
                        **kw)
        db.add(a)
        db.commit()
        db.refresh(a)
        return a

    return _make


@pytest.fixture
def make_price(db):
    counter = {"n": 0}

    def _make(type=PriceType.APPOINTMENT, amount="50", name=None, code=None,
              active=True, **kw):
        counter["n"] += 1
        t = getattr(type, "value", type)
        p = Price(type=t,
                  code=code or f"{t}-{counter['n']}",
                  name=name or f"{t.title()} fee {counter['n']}",
                  amount=Decimal(str(amount)),
                  active=active,
                  **kw)
        db.add(p)
        db.commit()
        db.refresh(p)
        return p

    return _make


@pytest.fixture
def make_lab_request(db):

    def _make(appointment, price, **kw):
        r = LabRequest(appointment_id=appointment.id,
                       requested_by_doctor_id=appointment.doctor_id,
                       price_id=price.id,
                       is_paid=kw.pop("is_paid", False),
                       **kw)
        db.add(r)
        db.commit()
        db.refresh(r)
        return r

    return _make


@pytest.fixture
def auth_header():

    def _hdr(user):
        token = create_access_token(user_id=user.id, role=user.role)
        return {"Authorization": f"Bearer {token}"}

    return _hdr
