from __future__ import annotations

from datetime import datetime, timedelta

from app.economy.regen.errors import RegenConfigError
from app.economy.regen.time import elapsed_ticks
from app.economy.regen.types import AccrualResult


def compute_accrual(
    last_regen_at: datetime,
    now_utc: datetime,
    *,
    tick_seconds: int,
    yield_per_tick: int,
    max_catch_up_ticks: int | None = None,
) -> AccrualResult:
    """Whole ticks elapsed since the watermark and the balance delta they earn.

    The watermark only moves by whole ticks, so a partial tick carries over to
    the next call. With ``max_catch_up_ticks`` set, ticks beyond the cap are
    skipped over but not credited.
    """
    if tick_seconds <= 0:
        raise RegenConfigError(f"tick_seconds must be positive, got {tick_seconds}")
    if yield_per_tick < 0:
        raise RegenConfigError(f"yield_per_tick must be non-negative, got {yield_per_tick}")
    if max_catch_up_ticks is not None and max_catch_up_ticks < 1:
        raise RegenConfigError(f"max_catch_up_ticks must be at least 1, got {max_catch_up_ticks}")

    tick = timedelta(seconds=tick_seconds)
    ticks = elapsed_ticks(last_regen_at, now_utc, tick)
    if ticks == 0:
        return AccrualResult(ticks_elapsed=0, delta=0, new_last_regen_at=last_regen_at)

    credited = ticks if max_catch_up_ticks is None else min(ticks, max_catch_up_ticks)
    return AccrualResult(
        ticks_elapsed=ticks,
        delta=credited * yield_per_tick,
        new_last_regen_at=last_regen_at + tick * ticks,
        ticks_forfeited=ticks - credited,
    )


def apply_accrual(balance: int, accrual: AccrualResult) -> int:
    if balance < 0:
        raise ValueError("balance must be non-negative")
    return balance + accrual.delta
