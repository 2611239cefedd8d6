from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.engine import make_url

REGEN_TABLES = ("regen_balances",)
SCHEMA_BOOKKEEPING_TABLES = {"alembic_version"}

TEST_DB_NAME_RE = re.compile(r"test", re.IGNORECASE)
ALLOWED_LOCAL_HOSTS = {
    "localhost",
    "127.0.0.1",
    "::1",
    "postgres",
    "cx_regen_postgres",
}


@dataclass(frozen=True, slots=True)
class IntegrationDbSafetyResult:
    is_safe: bool
    reason: str
    database_name: str
    host: str


def assess_integration_db_safety(database_url: str) -> IntegrationDbSafetyResult:
    parsed = make_url(database_url)
    db_name = (parsed.database or "").strip()
    host = (parsed.host or "").strip().lower()

    def _result(is_safe: bool, reason: str) -> IntegrationDbSafetyResult:
        return IntegrationDbSafetyResult(is_safe=is_safe, reason=reason, database_name=db_name, host=host)

    if parsed.get_backend_name() != "postgresql":
        return _result(False, "Integration tests need PostgreSQL for conditional upserts.")
    if not db_name:
        return _result(False, "Database name is empty.")
    if TEST_DB_NAME_RE.search(db_name) is None:
        return _result(False, "Database name must clearly indicate a test database (contain 'test').")
    if host not in ALLOWED_LOCAL_HOSTS:
        return _result(False, "Host is not in allowed local integration-test hosts.")
    return _result(True, "ok")


def assert_safe_integration_db(database_url: str) -> None:
    result = assess_integration_db_safety(database_url)
    if result.is_safe:
        return

    raise RuntimeError(
        "Refusing to run integration tests against regen_balances with destructive TRUNCATE.\n"
        f"Reason: {result.reason}\n"
        f"Resolved DB: name='{result.database_name}' host='{result.host}'\n"
        "Required: use a dedicated local PostgreSQL test DB, e.g. 'cx_regen_test'."
    )


def assert_integration_tables(table_names: Iterable[str]) -> None:
    """Checks the schema before ``TRUNCATE`` wipes the regen tables.

    Every table in ``REGEN_TABLES`` must exist, and nothing outside them (apart
    from alembic bookkeeping) may be present.
    """
    present = set(table_names)
    missing = [name for name in REGEN_TABLES if name not in present]
    foreign = sorted(present - set(REGEN_TABLES) - SCHEMA_BOOKKEEPING_TABLES)
    if not missing and not foreign:
        return

    raise RuntimeError(
        "Refusing to TRUNCATE regen tables in this database.\n"
        f"Missing regen tables: {missing or 'none'}\n"
        f"Unrelated tables: {foreign or 'none'}"
    )
