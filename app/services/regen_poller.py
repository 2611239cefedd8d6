from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx
import structlog

logger = structlog.get_logger(__name__)

REGENERATE_PATH = "/api/regenerate"


@dataclass(frozen=True, slots=True)
class PollOutcome:
    ok: bool
    status_code: int | None
    intervals_elapsed: int = 0
    balance: int | None = None


async def poll_once(client: httpx.AsyncClient, *, fid: int) -> PollOutcome:
    try:
        response = await client.post(REGENERATE_PATH, params={"fid": fid})
    except httpx.HTTPError:
        logger.exception("regen_poll_transport_failed", fid=fid)
        return PollOutcome(ok=False, status_code=None)

    if response.status_code == 503:
        logger.warning(
            "regen_poll_contention",
            fid=fid,
            retry_after=response.headers.get("Retry-After"),
        )
        return PollOutcome(ok=False, status_code=response.status_code)

    if response.is_error:
        logger.error(
            "regen_poll_rejected",
            fid=fid,
            status_code=response.status_code,
            body=response.text[:200],
        )
        return PollOutcome(ok=False, status_code=response.status_code)

    try:
        payload = response.json()
        intervals_elapsed = int(payload["intervals_elapsed"])
        balance = int(payload["balance"])
    except (ValueError, KeyError, TypeError):
        logger.warning(
            "regen_poll_bad_payload",
            fid=fid,
            status_code=response.status_code,
            body=response.text[:200],
        )
        return PollOutcome(ok=False, status_code=response.status_code)

    if intervals_elapsed > 0:
        logger.info("regen_poll_applied", fid=fid, intervals_elapsed=intervals_elapsed, balance=balance)
    return PollOutcome(
        ok=True,
        status_code=response.status_code,
        intervals_elapsed=intervals_elapsed,
        balance=balance,
    )


async def run_poller(
    *,
    base_url: str,
    fid: int,
    interval_seconds: float,
    iterations: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> int:
    """Polls the regenerate endpoint now and then every ``interval_seconds``.

    Runs forever unless ``iterations`` is given. Failed polls are logged and
    skipped; the server recomputes missed ticks on the next successful call.
    Returns the total number of intervals applied.
    """
    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be positive")

    total_intervals = 0
    completed = 0
    async with httpx.AsyncClient(base_url=base_url, timeout=10.0, transport=transport) as client:
        while iterations is None or completed < iterations:
            outcome = await poll_once(client, fid=fid)
            total_intervals += outcome.intervals_elapsed
            completed += 1
            if iterations is not None and completed >= iterations:
                break
            await sleep(interval_seconds)

    logger.info("regen_poller_stopped", fid=fid, polls=completed, intervals_applied=total_intervals)
    return total_intervals
