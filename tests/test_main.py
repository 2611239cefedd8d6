from __future__ import annotations

import pytest

from app.core.config import get_settings
from app.economy.regen.errors import RegenConfigError
from app.main import create_app


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("REGEN_TICK_SECONDS", "0"),
        ("REGEN_YIELD_PER_TICK", "-1"),
        ("REGEN_MAX_CATCH_UP_TICKS", "0"),
    ],
)
def test_create_app_refuses_bad_regen_config(monkeypatch, fresh_settings, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(RegenConfigError):
        create_app()


def test_create_app_mounts_regen_routes(monkeypatch, fresh_settings) -> None:
    monkeypatch.setenv("REGEN_TICK_SECONDS", "60")

    app = create_app()

    paths = {route.path for route in app.routes}
    assert "/api/regenerate" in paths
    assert "/api/regenerate/status" in paths
    assert "/ready" in paths
