from __future__ import annotations

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.models.regen_balances import RegenBalance
from app.db.repo.regen_balances_repo import RegenBalancesRepo
from app.db.session import SessionLocal
from app.economy.regen.errors import RegenConflictError
from app.economy.regen.types import UserBalance


class BalanceStore(Protocol):
    async def read_or_create(self, fid: int, now_utc: datetime) -> tuple[UserBalance, bool]: ...

    async def get(self, fid: int) -> UserBalance | None: ...

    async def commit(
        self,
        fid: int,
        *,
        new_balance: int,
        new_last_regen_at: datetime,
        expected_last_regen_at: datetime,
        now_utc: datetime,
    ) -> None: ...


def balance_from_model(state: RegenBalance) -> UserBalance:
    return UserBalance(
        fid=state.fid,
        balance=state.balance,
        last_regen_at=state.last_regen_at,
    )


class SqlBalanceStore:
    """Balance rows in PostgreSQL, one short transaction per operation."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_factory = session_factory or SessionLocal

    async def read_or_create(self, fid: int, now_utc: datetime) -> tuple[UserBalance, bool]:
        async with self._session_factory.begin() as session:
            state = await RegenBalancesRepo.get_by_fid(session, fid)
            if state is not None:
                return balance_from_model(state), False

            inserted = await RegenBalancesRepo.insert_if_absent(session, fid=fid, now_utc=now_utc)
            if inserted:
                return UserBalance(fid=fid, balance=0, last_regen_at=now_utc), True

            # lost the first-touch race; the winner's row is committed by now
            state = await RegenBalancesRepo.get_by_fid(session, fid)
            if state is None:
                raise RegenConflictError(f"regen balance for fid={fid} vanished after insert conflict")
            return balance_from_model(state), False

    async def get(self, fid: int) -> UserBalance | None:
        async with self._session_factory() as session:
            state = await RegenBalancesRepo.get_by_fid(session, fid)
            return balance_from_model(state) if state is not None else None

    async def commit(
        self,
        fid: int,
        *,
        new_balance: int,
        new_last_regen_at: datetime,
        expected_last_regen_at: datetime,
        now_utc: datetime,
    ) -> None:
        if new_balance < 0:
            raise ValueError("new_balance must be non-negative")

        async with self._session_factory.begin() as session:
            updated = await RegenBalancesRepo.compare_and_set(
                session,
                fid=fid,
                new_balance=new_balance,
                new_last_regen_at=new_last_regen_at,
                expected_last_regen_at=expected_last_regen_at,
                now_utc=now_utc,
            )
        if not updated:
            raise RegenConflictError(
                f"regen watermark for fid={fid} moved away from {expected_last_regen_at.isoformat()}"
            )
