from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence

from app.core.config import Settings, get_settings
from app.core.logging import configure_logging
from app.services.regen_poller import run_poller


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Poll the cx regeneration endpoint for one fid")
    parser.add_argument("--fid", type=int, required=True)
    parser.add_argument("--base-url", help="defaults to REGEN_API_BASE_URL")
    parser.add_argument("--interval-seconds", type=float, help="defaults to one regen tick")
    parser.add_argument("--once", action="store_true", help="poll a single time and exit")
    args = parser.parse_args(argv)

    if args.fid <= 0:
        parser.error("--fid must be a positive integer")
    if args.interval_seconds is not None and args.interval_seconds <= 0:
        parser.error("--interval-seconds must be positive")
    return args


def _resolve_interval_seconds(args: argparse.Namespace, settings: Settings) -> float:
    if args.interval_seconds is not None:
        return args.interval_seconds
    if settings.regen_poll_interval_seconds is not None:
        if settings.regen_poll_interval_seconds <= 0:
            raise SystemExit("REGEN_POLL_INTERVAL_SECONDS must be positive")
        return settings.regen_poll_interval_seconds
    return float(settings.regen_tick_seconds)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)
    interval_seconds = _resolve_interval_seconds(args, settings)

    asyncio.run(
        run_poller(
            base_url=args.base_url or settings.regen_api_base_url,
            fid=args.fid,
            interval_seconds=interval_seconds,
            iterations=1 if args.once else None,
        )
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
