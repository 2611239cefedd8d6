from __future__ import annotations

import math
from datetime import datetime, timedelta


def elapsed_ticks(last_regen_at: datetime, now_utc: datetime, tick: timedelta) -> int:
    """Returns number of whole ticks between the watermark and now, never negative."""
    elapsed = now_utc - last_regen_at
    if elapsed <= timedelta(0):
        return 0
    return elapsed // tick


def next_tick_at(last_regen_at: datetime, now_utc: datetime, tick: timedelta) -> datetime:
    """First tick boundary anchored at the watermark that is strictly after now."""
    return last_regen_at + tick * (elapsed_ticks(last_regen_at, now_utc, tick) + 1)


def seconds_until(target: datetime, now_utc: datetime) -> int:
    return max(0, math.ceil((target - now_utc).total_seconds()))
