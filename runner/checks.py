from __future__ import annotations

from runner.types import Probe, ProbeResult

# What a deployed instance must answer, written out independently of the
# server's own route table.
EXPECTED_GREETINGS: dict[str, str] = {
    "/": "Hello, CI/CD World!",
    "/new": "Hello, New Endpoint!",
}

# Requests that must fall through to not-found.
NOT_FOUND_CASES: tuple[tuple[str, str], ...] = (
    ("GET", "/unknown"),
    ("GET", "/new/"),
    ("GET", "/docs"),
    ("GET", "/redoc"),
    ("GET", "/openapi.json"),
    ("POST", "/"),
    ("DELETE", "/new"),
    ("HEAD", "/"),
    ("OPTIONS", "/"),
)


def build_probes() -> list[Probe]:
    """Every greeting route plus the not-found cases, with expected replies."""
    probes = [
        Probe(method="GET", path=path, expected_status=200, expected_body=body)
        for path, body in sorted(EXPECTED_GREETINGS.items())
    ]
    probes.extend(
        Probe(method=method, path=path, expected_status=404)
        for method, path in NOT_FOUND_CASES
    )
    return probes


def percentile(values: list[float], p: float) -> float:
    """Compute the p-th percentile using linear interpolation."""
    if not values:
        return 0.0
    s = sorted(values)
    k = (len(s) - 1) * p
    f = int(k)
    c = min(f + 1, len(s) - 1)
    if f == c:
        return s[f]
    return s[f] * (c - k) + s[c] * (k - f)


def summarize(results: list[ProbeResult]) -> tuple[dict, int]:
    """Compute summary dict and an exit code from probe results."""
    failures = [
        {
            "method": r.probe.method,
            "path": r.probe.path,
            "expected_status": r.probe.expected_status,
            "status_code": r.status_code,
            "expected_body": r.probe.expected_body,
            "body": r.body,
            "error": r.error,
        }
        for r in results
        if not r.ok
    ]
    timings = [r.elapsed_ms for r in results]
    summary = {
        "component": "runner",
        "event": "summary",
        "probes": len(results),
        "passed": len(results) - len(failures),
        "failed": len(failures),
        "timings": {
            "p95_ms": round(percentile(timings, 0.95), 2),
            "max_ms": round(max(timings), 2) if timings else 0.0,
        },
        "failures": failures,
    }
    exit_code = 0 if (results and not failures) else 1
    return summary, exit_code
