from __future__ import annotations

from datetime import datetime

import structlog

from app.economy.regen.errors import RegenBalanceNotFoundError, RegenConflictError, RegenContentionError
from app.economy.regen.rules import apply_accrual, compute_accrual
from app.economy.regen.store import BalanceStore
from app.economy.regen.time import next_tick_at, seconds_until
from app.economy.regen.types import AccrualResult, RegenConfig, RegenResult, RegenStatus, UserBalance

logger = structlog.get_logger(__name__)


class RegenerationService:
    """Applies elapsed regen ticks to a user's balance exactly once.

    Every call recomputes from the stored watermark, so the caller's polling
    cadence does not matter. Writes go through a compare-and-swap on the
    watermark; a lost race re-reads and recomputes up to
    ``config.max_commit_attempts`` times.
    """

    def __init__(self, store: BalanceStore, config: RegenConfig) -> None:
        self._store = store
        self._config = config

    @property
    def config(self) -> RegenConfig:
        return self._config

    def _accrue(self, current: UserBalance, now_utc: datetime) -> AccrualResult:
        return compute_accrual(
            current.last_regen_at,
            now_utc,
            tick_seconds=self._config.tick_seconds,
            yield_per_tick=self._config.yield_per_tick,
            max_catch_up_ticks=self._config.max_catch_up_ticks,
        )

    def _result(
        self,
        *,
        fid: int,
        balance: int,
        last_regen_at: datetime,
        now_utc: datetime,
        intervals_elapsed: int,
        created: bool,
        attempts: int,
        ticks_forfeited: int = 0,
    ) -> RegenResult:
        return RegenResult(
            fid=fid,
            intervals_elapsed=intervals_elapsed,
            balance=balance,
            last_regen_at=last_regen_at,
            next_regen_at=next_tick_at(last_regen_at, now_utc, self._config.tick),
            created=created,
            attempts=attempts,
            ticks_forfeited=ticks_forfeited,
        )

    async def regenerate(self, fid: int, *, now_utc: datetime) -> RegenResult:
        max_attempts = self._config.max_commit_attempts
        for attempt in range(1, max_attempts + 1):
            current, created = await self._store.read_or_create(fid, now_utc)
            if created:
                logger.info("regen_balance_created", fid=fid, last_regen_at=current.last_regen_at.isoformat())
                return self._result(
                    fid=fid,
                    balance=current.balance,
                    last_regen_at=current.last_regen_at,
                    now_utc=now_utc,
                    intervals_elapsed=0,
                    created=True,
                    attempts=attempt,
                )

            accrual = self._accrue(current, now_utc)
            if accrual.ticks_elapsed == 0:
                if now_utc < current.last_regen_at:
                    logger.warning(
                        "regen_clock_behind_watermark",
                        fid=fid,
                        now_utc=now_utc.isoformat(),
                        last_regen_at=current.last_regen_at.isoformat(),
                    )
                logger.debug("regen_noop", fid=fid)
                return self._result(
                    fid=fid,
                    balance=current.balance,
                    last_regen_at=current.last_regen_at,
                    now_utc=now_utc,
                    intervals_elapsed=0,
                    created=False,
                    attempts=attempt,
                )

            new_balance = apply_accrual(current.balance, accrual)
            try:
                await self._store.commit(
                    fid,
                    new_balance=new_balance,
                    new_last_regen_at=accrual.new_last_regen_at,
                    expected_last_regen_at=current.last_regen_at,
                    now_utc=now_utc,
                )
            except RegenConflictError:
                logger.info("regen_commit_conflict", fid=fid, attempt=attempt, max_attempts=max_attempts)
                continue

            if accrual.ticks_forfeited:
                logger.warning(
                    "regen_catch_up_capped",
                    fid=fid,
                    ticks_elapsed=accrual.ticks_elapsed,
                    ticks_forfeited=accrual.ticks_forfeited,
                )
            logger.info(
                "regen_applied",
                fid=fid,
                intervals_elapsed=accrual.ticks_credited,
                delta=accrual.delta,
                balance=new_balance,
                last_regen_at=accrual.new_last_regen_at.isoformat(),
                attempt=attempt,
            )
            return self._result(
                fid=fid,
                balance=new_balance,
                last_regen_at=accrual.new_last_regen_at,
                now_utc=now_utc,
                intervals_elapsed=accrual.ticks_credited,
                created=False,
                attempts=attempt,
                ticks_forfeited=accrual.ticks_forfeited,
            )

        logger.warning("regen_contention_exhausted", fid=fid, attempts=max_attempts)
        raise RegenContentionError(fid=fid, attempts=max_attempts)

    async def status(self, fid: int, *, now_utc: datetime) -> RegenStatus:
        current = await self._store.get(fid)
        if current is None:
            raise RegenBalanceNotFoundError(f"no regen balance for fid={fid}")

        accrual = self._accrue(current, now_utc)
        next_regen_at = next_tick_at(current.last_regen_at, now_utc, self._config.tick)
        return RegenStatus(
            fid=fid,
            balance=current.balance,
            last_regen_at=current.last_regen_at,
            next_regen_at=next_regen_at,
            seconds_until_next=seconds_until(next_regen_at, now_utc),
            pending_intervals=accrual.ticks_credited,
        )
