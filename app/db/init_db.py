# app/db/init_db.py
from __future__ import annotations

import argparse
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import hash_password
from app.db.session import engine as default_engine
from app.db.base import Base

# Import all models so metadata is complete
from app.models import (  # noqa: F401
    User, UserRole, Patient, Doctor, Appointment, LabRequest, Price, Invoice,
    InvoiceItem, Payment)

logger = logging.getLogger(__name__)


def init_db(engine: Engine = default_engine, *, fresh: bool = False) -> None:
    if fresh:
        logger.warning("Dropping ALL tables (dev only)")
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    logger.info("Tables ready: %s", sorted(Base.metadata.tables))


def seed_admin(db: Session,
               email: str | None = None,
               password: str | None = None) -> User:
    """
    Create the admin account if it does not exist yet; safe to run
    multiple times.
    """
    email = (email or settings.SEED_ADMIN_EMAIL).strip().lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        logger.info("Admin user already exists: %s", email)
        return existing

    user = User(
        email=email,
        password_hash=hash_password(password or settings.SEED_ADMIN_PASSWORD),
        role=UserRole.ADMIN.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Admin user created: %s", email)
    return user


def run(fresh: bool = False, seed: bool = False) -> None:
    init_db(fresh=fresh)
    if not seed:
        return
    try:
        with Session(default_engine) as db:
            seed_admin(db)
    except SQLAlchemyError:
        logger.exception("Seeding failed")
        raise


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    parser = argparse.ArgumentParser(
        description="Initialize DB (create tables, optionally seed admin).")
    parser.add_argument(
        "--fresh",
        action="store_true",
        help="Drop & recreate all tables (DEV ONLY).",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Create the admin user if missing.",
    )
    args = parser.parse_args()
    run(fresh=args.fresh, seed=args.seed)
