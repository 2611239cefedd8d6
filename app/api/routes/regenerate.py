from __future__ import annotations

from datetime import datetime
from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from app.core.clock import Clock, get_clock
from app.core.config import get_settings
from app.core.logging import bind_request_context
from app.economy.regen.constants import CONTENTION_RETRY_AFTER_SECONDS
from app.economy.regen.errors import RegenBalanceNotFoundError, RegenContentionError
from app.economy.regen.service import RegenerationService
from app.economy.regen.store import SqlBalanceStore
from app.economy.regen.types import RegenConfig

router = APIRouter(prefix="/api/regenerate", tags=["regen"])
logger = structlog.get_logger(__name__)


class RegenerateResponse(BaseModel):
    fid: int
    intervals_elapsed: int = Field(ge=0)
    balance: int = Field(ge=0)
    last_regen_at: datetime
    next_regen_at: datetime
    created: bool


class RegenStatusResponse(BaseModel):
    fid: int
    balance: int = Field(ge=0)
    last_regen_at: datetime
    next_regen_at: datetime
    seconds_until_next: int = Field(ge=0)
    pending_intervals: int = Field(ge=0)


@lru_cache(maxsize=1)
def get_regeneration_service() -> RegenerationService:
    return RegenerationService(SqlBalanceStore(), RegenConfig.from_settings(get_settings()))


@router.post("", response_model=RegenerateResponse)
async def regenerate(
    fid: int = Query(gt=0),
    service: RegenerationService = Depends(get_regeneration_service),
    clock: Clock = Depends(get_clock),
) -> RegenerateResponse:
    bind_request_context(fid=fid, route="regenerate")
    try:
        result = await service.regenerate(fid, now_utc=clock.now())
    except RegenContentionError as exc:
        raise HTTPException(
            status_code=503,
            detail={"code": "E_REGEN_CONTENTION"},
            headers={"Retry-After": str(CONTENTION_RETRY_AFTER_SECONDS)},
        ) from exc

    if result.intervals_elapsed > 0:
        logger.info(
            "regen_request_applied",
            intervals_elapsed=result.intervals_elapsed,
            minutes=result.intervals_elapsed * service.config.tick_seconds // 60,
        )
    return RegenerateResponse(
        fid=result.fid,
        intervals_elapsed=result.intervals_elapsed,
        balance=result.balance,
        last_regen_at=result.last_regen_at,
        next_regen_at=result.next_regen_at,
        created=result.created,
    )


@router.get("/status", response_model=RegenStatusResponse)
async def regen_status(
    fid: int = Query(gt=0),
    service: RegenerationService = Depends(get_regeneration_service),
    clock: Clock = Depends(get_clock),
) -> RegenStatusResponse:
    try:
        status = await service.status(fid, now_utc=clock.now())
    except RegenBalanceNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_REGEN_BALANCE_NOT_FOUND"}) from exc

    return RegenStatusResponse(
        fid=status.fid,
        balance=status.balance,
        last_regen_at=status.last_regen_at,
        next_regen_at=status.next_regen_at,
        seconds_until_next=status.seconds_until_next,
        pending_intervals=status.pending_intervals,
    )
