from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from customer_manager.core.config import DATABASE_URL, IS_PROD
from customer_manager.core.database import Base

logger = logging.getLogger(__name__)
SCHEMA_PREFIX = "[SCHEMA]"
REQUIRED_TABLES = ("customers", "addresses")


def validate_database_environment(database_url: str = DATABASE_URL, *, is_prod: bool = IS_PROD) -> None:
    if is_prod and database_url.startswith("sqlite"):
        logger.critical("%s SQLite is forbidden in production", SCHEMA_PREFIX)
        raise RuntimeError("SQLite is forbidden in production environment")


def ensure_schema(*, engine: Engine) -> None:
    """Create missing tables and verify the record tables exist."""
    import customer_manager.models  # noqa: F401  registers the models on Base.metadata

    Base.metadata.create_all(bind=engine)

    inspector = inspect(engine)
    missing = [table for table in REQUIRED_TABLES if not inspector.has_table(table)]
    if missing:
        logger.critical("%s tables missing=%s", SCHEMA_PREFIX, ",".join(missing))
        raise RuntimeError("Required tables are missing")

    logger.info("%s schema verified tables=%s", SCHEMA_PREFIX, ",".join(REQUIRED_TABLES))
