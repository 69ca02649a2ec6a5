#!/usr/bin/env python3
"""Post-deploy smoke check for the Greeting Dispatcher.

Steps:
- wait until GET / answers 200
- probe every greeting route and the not-found cases
- emit a JSON summary and exit 0 only if every probe matched
"""
from __future__ import annotations

import asyncio
import sys

import httpx

from app.logging_conf import get_logger, setup_logging
from runner.checks import build_probes, summarize
from runner.cli import parse_args
from runner.client import run_probes, wait_for_ready
from runner.types import SmokeError

setup_logging(component="runner", align_server_loggers=False)
logger = get_logger("runner")


async def run_smoke(
    *,
    base_url: str,
    timeout_s: float = 20.0,
    retries: int = 3,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    try:
        await wait_for_ready(base_url, timeout_s, transport=transport)
    except SmokeError as e:
        logger.error("runner.aborted", extra={"event": "runner_aborted", "error": str(e)})
        return 1
    results = await run_probes(base_url, build_probes(), retries=retries, transport=transport)
    summary, exit_code = summarize(results)
    logger.info("runner.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    code = asyncio.run(
        run_smoke(base_url=args.base_url, timeout_s=args.timeout, retries=args.retries)
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
