from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable

import httpx

from app.logging_conf import get_logger
from runner.types import NotReadyError, Probe, ProbeError, ProbeResult

logger = get_logger("runner.client")


async def wait_for_ready(
    base_url: str,
    timeout_s: float = 20.0,
    *,
    poll_interval_s: float = 0.25,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Ping GET / until it answers 200 or raise after a timeout."""
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0, transport=transport) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/")
                if r.status_code == 200:
                    logger.info("ready.ok", extra={"event": "ready_ok", "base_url": base_url})
                    return
            except httpx.TransportError:
                pass
            await asyncio.sleep(poll_interval_s)
    raise NotReadyError(f"{base_url} did not become ready within {timeout_s}s")


async def send_probe(client: httpx.AsyncClient, probe: Probe, *, retries: int = 3) -> ProbeResult:
    """Issue one probe, retrying transport failures.

    An HTTP status of any kind is an answer and is returned as-is; only
    connection-level errors are retried.
    """
    if retries < 1:
        raise ValueError("retries must be at least 1")
    last_err: Exception | None = None
    for attempt in range(retries):
        start = time.perf_counter()
        try:
            r = await client.request(probe.method, probe.path)
        except httpx.TransportError as e:
            last_err = e
            logger.warning(
                "probe.retry",
                extra={
                    "event": "probe_retry",
                    "method": probe.method,
                    "path": probe.path,
                    "attempt": attempt + 1,
                    "error": str(e),
                },
            )
            continue
        return ProbeResult(
            probe=probe,
            status_code=r.status_code,
            body=r.text,
            elapsed_ms=round((time.perf_counter() - start) * 1000.0, 2),
        )
    raise ProbeError(f"{probe.method} {probe.path} failed: {last_err}")


async def run_probes(
    base_url: str,
    probes: Iterable[Probe],
    *,
    retries: int = 3,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[ProbeResult]:
    """Send all probes concurrently and return their results in order.

    A probe that exhausts its retries is reported as a failed result carrying
    the error, so one unreachable route never hides the others.
    """
    probes = list(probes)
    async with httpx.AsyncClient(base_url=base_url, timeout=10.0, transport=transport) as client:
        tasks = [send_probe(client, p, retries=retries) for p in probes]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

    results: list[ProbeResult] = []
    for probe, outcome in zip(probes, outcomes):
        if isinstance(outcome, ProbeError):
            results.append(
                ProbeResult(
                    probe=probe, status_code=0, body="", elapsed_ms=0.0, error=str(outcome)
                )
            )
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append(outcome)
    return results
