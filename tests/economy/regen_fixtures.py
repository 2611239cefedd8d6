from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime

from app.economy.regen.errors import RegenConflictError
from app.economy.regen.types import UserBalance

BeforeCommitHook = Callable[["InMemoryBalanceStore", int], Awaitable[None]]


class InMemoryBalanceStore:
    """BalanceStore double with the same compare-and-swap contract as SqlBalanceStore.

    Each operation yields to the event loop once, so concurrent tasks
    interleave between read and commit like real requests do.
    """

    def __init__(self) -> None:
        self.rows: dict[int, UserBalance] = {}
        self.created_at: dict[int, datetime] = {}
        self.commits = 0
        self.conflicts = 0
        self.before_commit: BeforeCommitHook | None = None

    async def read_or_create(self, fid: int, now_utc: datetime) -> tuple[UserBalance, bool]:
        await asyncio.sleep(0)
        existing = self.rows.get(fid)
        if existing is not None:
            return existing, False
        created = UserBalance(fid=fid, balance=0, last_regen_at=now_utc)
        self.rows[fid] = created
        self.created_at[fid] = now_utc
        return created, True

    async def get(self, fid: int) -> UserBalance | None:
        await asyncio.sleep(0)
        return self.rows.get(fid)

    async def commit(
        self,
        fid: int,
        *,
        new_balance: int,
        new_last_regen_at: datetime,
        expected_last_regen_at: datetime,
        now_utc: datetime,
    ) -> None:
        if self.before_commit is not None:
            await self.before_commit(self, fid)
        await asyncio.sleep(0)
        current = self.rows[fid]
        if current.last_regen_at != expected_last_regen_at:
            self.conflicts += 1
            raise RegenConflictError(f"watermark moved for fid={fid}")
        self.rows[fid] = UserBalance(fid=fid, balance=new_balance, last_regen_at=new_last_regen_at)
        self.commits += 1

    def seed(self, fid: int, *, balance: int, last_regen_at: datetime) -> None:
        self.rows[fid] = UserBalance(fid=fid, balance=balance, last_regen_at=last_regen_at)
        self.created_at.setdefault(fid, last_regen_at)
