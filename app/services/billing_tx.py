# FILE: app/services/billing_tx.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.services.billing_errors import BillingError, PersistenceFailure

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, *, action: str) -> Iterator[Session]:
    """
    One unit of work on the given session.

    Commits when the block finishes, rolls back on any failure.
    Classified BillingErrors pass through unchanged; raw database errors
    are logged and re-raised as PersistenceFailure.
    """
    try:
        yield db
        db.commit()
    except BillingError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("%s failed: database error", action)
        raise PersistenceFailure(f"{action} failed", details=str(e)) from e
    except Exception:
        db.rollback()
        raise
