from __future__ import annotations

import pytest
from sqlalchemy import inspect, text

from app.core.integration_db_safety import (
    REGEN_TABLES,
    assert_integration_tables,
    assert_safe_integration_db,
    assess_integration_db_safety,
)
from app.db.models import RegenBalance  # noqa: F401
from app.db.models.base import Base
from app.db.session import engine


TRUNCATE_SQL = f"TRUNCATE TABLE {', '.join(REGEN_TABLES)}"


@pytest.fixture(scope="session", autouse=True)
def guard_integration_db_target() -> None:
    database_url = engine.url.render_as_string(hide_password=False)
    if not assess_integration_db_safety(database_url).is_safe:
        pytest.skip("DATABASE_URL does not point at a local *_test PostgreSQL database")
    assert_safe_integration_db(database_url)


@pytest.fixture(autouse=True)
async def cleanup_db() -> None:
    # Dispose pooled connections between tests to avoid cross-event-loop asyncpg reuse.
    await engine.dispose()

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:  # pragma: no cover - environment-dependent
        pytest.skip(f"Postgres is required for integration tests: {exc}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        table_names = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        assert_integration_tables(table_names)
        await conn.execute(text(TRUNCATE_SQL))

    yield

    await engine.dispose()
