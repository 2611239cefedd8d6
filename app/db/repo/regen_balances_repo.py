from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.regen_balances import RegenBalance


class RegenBalancesRepo:
    @staticmethod
    async def get_by_fid(session: AsyncSession, fid: int) -> RegenBalance | None:
        stmt = select(RegenBalance).where(RegenBalance.fid == fid)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def insert_if_absent(
        session: AsyncSession,
        *,
        fid: int,
        now_utc: datetime,
    ) -> bool:
        stmt = (
            pg_insert(RegenBalance)
            .values(
                fid=fid,
                balance=0,
                last_regen_at=now_utc,
                version=0,
                created_at=now_utc,
                updated_at=now_utc,
            )
            .on_conflict_do_nothing(index_elements=[RegenBalance.fid])
            .returning(RegenBalance.fid)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def compare_and_set(
        session: AsyncSession,
        *,
        fid: int,
        new_balance: int,
        new_last_regen_at: datetime,
        expected_last_regen_at: datetime,
        now_utc: datetime,
    ) -> bool:
        stmt = (
            update(RegenBalance)
            .where(
                RegenBalance.fid == fid,
                RegenBalance.last_regen_at == expected_last_regen_at,
            )
            .values(
                balance=new_balance,
                last_regen_at=new_last_regen_at,
                version=RegenBalance.version + 1,
                updated_at=now_utc,
            )
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return bool(result.rowcount)
