import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from customer_manager.core import startup_checks
from customer_manager.core.database import build_engine


def test_sqlite_is_forbidden_in_production():
    with pytest.raises(RuntimeError):
        startup_checks.validate_database_environment("sqlite:///./customers.db", is_prod=True)


def test_sqlite_is_allowed_outside_production():
    startup_checks.validate_database_environment("sqlite:///./customers.db", is_prod=False)


def test_ensure_schema_creates_record_tables():
    engine = build_engine("sqlite+pysqlite:///:memory:", poolclass=StaticPool)

    startup_checks.ensure_schema(engine=engine)

    inspector = inspect(engine)
    assert inspector.has_table("customers")
    assert inspector.has_table("addresses")
    foreign_keys = inspector.get_foreign_keys("addresses")
    assert foreign_keys[0]["referred_table"] == "customers"
    assert foreign_keys[0]["options"].get("ondelete") == "CASCADE"


def test_sqlite_connections_enforce_foreign_keys():
    engine = build_engine("sqlite+pysqlite:///:memory:", poolclass=StaticPool)

    with engine.connect() as connection:
        enabled = connection.exec_driver_sql("PRAGMA foreign_keys").scalar()

    assert enabled == 1
