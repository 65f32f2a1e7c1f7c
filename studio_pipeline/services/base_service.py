"""Service base owning a SQLAlchemy session and its transaction boundaries."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import studio_pipeline.database.db as db_module

logger = logging.getLogger(__name__)


class BaseService:
    """Base class for services that operate on a SQLAlchemy session.

    A session passed in by the caller (request scope, tests) is never closed
    here; a session the service opened itself is closed on ``close()``.
    """

    def __init__(self, db: Session | None = None) -> None:
        self._owns_session = db is None
        self.db = db or db_module.SessionLocal()

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def try_commit(self, event: str, **fields: Any) -> bool:
        """Commit for best-effort writes: failures are rolled back and logged, never raised."""
        try:
            self.db.commit()
            return True
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(event, extra={"event": event, **fields})
            return False

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        if self._owns_session:
            self.db.close()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()
