from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from customer_manager.core.errors import RecordError, StoreError, is_unique_violation, store_error_message

logger = logging.getLogger(__name__)


@contextmanager
def store_operation(
    db: Session,
    action: str,
    *,
    commit: bool = True,
    unique_error: Optional[RecordError] = None,
) -> Iterator[None]:
    """Run statements against ``db`` and translate store failures.

    Unique-constraint violations become ``unique_error`` when one is given;
    every other SQLAlchemy failure becomes a StoreError carrying the driver
    message. The session is rolled back before the error propagates.
    """
    try:
        yield
        if commit:
            db.commit()
    except IntegrityError as exc:
        db.rollback()
        if unique_error is not None and is_unique_violation(exc):
            logger.info("%s rejected: unique constraint", action)
            raise unique_error from exc
        logger.warning("%s failed: %s", action, store_error_message(exc))
        raise StoreError.from_exception(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("%s failed: %s", action, store_error_message(exc))
        raise StoreError.from_exception(exc) from exc


def like_pattern(term: str) -> str:
    """``%term%`` with LIKE wildcards in ``term`` escaped by backslash."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
