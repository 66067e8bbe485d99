# app/db/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """All clinic tables (users, patients, appointments, billing, etc.) inherit from this."""
    pass
