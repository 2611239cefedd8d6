from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from app.economy.regen.constants import DEFAULT_MAX_COMMIT_ATTEMPTS
from app.economy.regen.errors import RegenConfigError

if TYPE_CHECKING:
    from app.core.config import Settings


@dataclass(frozen=True, slots=True)
class RegenConfig:
    tick_seconds: int
    yield_per_tick: int
    max_commit_attempts: int = DEFAULT_MAX_COMMIT_ATTEMPTS
    max_catch_up_ticks: int | None = None

    def __post_init__(self) -> None:
        if self.tick_seconds <= 0:
            raise RegenConfigError(f"tick_seconds must be positive, got {self.tick_seconds}")
        if self.yield_per_tick < 0:
            raise RegenConfigError(f"yield_per_tick must be non-negative, got {self.yield_per_tick}")
        if self.max_commit_attempts < 1:
            raise RegenConfigError(f"max_commit_attempts must be at least 1, got {self.max_commit_attempts}")
        if self.max_catch_up_ticks is not None and self.max_catch_up_ticks < 1:
            raise RegenConfigError(f"max_catch_up_ticks must be at least 1, got {self.max_catch_up_ticks}")

    @property
    def tick(self) -> timedelta:
        return timedelta(seconds=self.tick_seconds)

    @classmethod
    def from_settings(cls, settings: Settings) -> RegenConfig:
        return cls(
            tick_seconds=settings.regen_tick_seconds,
            yield_per_tick=settings.regen_yield_per_tick,
            max_commit_attempts=settings.regen_max_commit_attempts,
            max_catch_up_ticks=settings.regen_max_catch_up_ticks,
        )


@dataclass(frozen=True, slots=True)
class UserBalance:
    fid: int
    balance: int
    last_regen_at: datetime


@dataclass(frozen=True, slots=True)
class AccrualResult:
    ticks_elapsed: int
    delta: int
    new_last_regen_at: datetime
    ticks_forfeited: int = 0

    @property
    def ticks_credited(self) -> int:
        return self.ticks_elapsed - self.ticks_forfeited


@dataclass(slots=True)
class RegenResult:
    fid: int
    intervals_elapsed: int
    balance: int
    last_regen_at: datetime
    next_regen_at: datetime
    created: bool
    attempts: int
    ticks_forfeited: int = 0


@dataclass(slots=True)
class RegenStatus:
    fid: int
    balance: int
    last_regen_at: datetime
    next_regen_at: datetime
    seconds_until_next: int
    pending_intervals: int
