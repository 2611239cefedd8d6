from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class RegenBalance(Base):
    __tablename__ = "regen_balances"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_regen_balances_balance_non_negative"),
        CheckConstraint("fid > 0", name="ck_regen_balances_fid_positive"),
        Index("idx_regen_balances_last_regen_at", "last_regen_at"),
    )

    fid: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    last_regen_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
