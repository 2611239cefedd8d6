from __future__ import annotations

import pytest

from app.core.integration_db_safety import (
    assert_integration_tables,
    assert_safe_integration_db,
    assess_integration_db_safety,
)


def test_assess_integration_db_safety_accepts_local_test_database() -> None:
    result = assess_integration_db_safety("postgresql+asyncpg://cx:cx@localhost:5432/cx_regen_test")

    assert result.is_safe is True
    assert result.database_name == "cx_regen_test"
    assert result.host == "localhost"


@pytest.mark.parametrize(
    "database_url",
    [
        "postgresql+asyncpg://cx:cx@localhost:5432/cx_regen",
        "postgresql+asyncpg://cx:cx@db.internal:5432/cx_regen_test",
        "sqlite+aiosqlite:///tmp/cx_regen_test.db",
    ],
)
def test_assess_integration_db_safety_rejects_unsafe_targets(database_url: str) -> None:
    result = assess_integration_db_safety(database_url)
    assert result.is_safe is False


def test_assert_safe_integration_db_raises_with_clear_message() -> None:
    with pytest.raises(RuntimeError, match="Refusing to run integration tests"):
        assert_safe_integration_db("postgresql+asyncpg://cx:cx@localhost:5432/cx_regen")


def test_assert_integration_tables_accepts_regen_schema() -> None:
    assert_integration_tables(["regen_balances", "alembic_version"])


def test_assert_integration_tables_requires_regen_balances() -> None:
    with pytest.raises(RuntimeError, match=r"Missing regen tables: \['regen_balances'\]"):
        assert_integration_tables(["alembic_version"])


def test_assert_integration_tables_rejects_shared_database() -> None:
    with pytest.raises(RuntimeError, match=r"Unrelated tables: \['users'\]"):
        assert_integration_tables(["regen_balances", "users"])
