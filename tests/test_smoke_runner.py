from __future__ import annotations

import asyncio

import httpx
import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from app.main import create_app
from app.domain.greetings import dispatch
from runner.checks import NOT_FOUND_CASES, build_probes, percentile, summarize
from runner.cli import parse_args
from runner.client import run_probes, send_probe, wait_for_ready
from runner.smoke import run_smoke
from runner.types import NotReadyError, Probe, ProbeError, ProbeResult

BASE_URL = "http://testserver"


def _asgi(app) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=app)


def test_build_probes_covers_routes_and_not_found():
    probes = {(p.method, p.path): p for p in build_probes()}
    assert probes[("GET", "/")].expected_body == "Hello, CI/CD World!"
    assert probes[("GET", "/new")].expected_status == 200
    assert probes[("GET", "/unknown")].expected_status == 404
    assert probes[("POST", "/")].expected_status == 404
    assert probes[("POST", "/")].expected_body is None


def test_smoke_passes_against_app():
    code = asyncio.run(run_smoke(base_url=BASE_URL, transport=_asgi(create_app())))
    assert code == 0


def test_smoke_fails_on_wrong_body():
    broken = FastAPI()

    @broken.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Hello, CI/CD World!"

    @broken.get("/new", response_class=PlainTextResponse)
    async def new() -> str:
        return "Hello, Old Endpoint!"

    code = asyncio.run(run_smoke(base_url=BASE_URL, transport=_asgi(broken)))
    assert code == 1


def test_wait_for_ready_times_out():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(NotReadyError):
        asyncio.run(
            wait_for_ready(
                BASE_URL, 0.2, poll_interval_s=0.05, transport=httpx.MockTransport(refuse)
            )
        )


def test_send_probe_retries_transport_errors():
    calls = {"n": 0}

    def flaky(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] < 3:
            raise httpx.ConnectError("reset", request=request)
        return httpx.Response(200, text="Hello, New Endpoint!")

    async def go() -> ProbeResult:
        async with httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(flaky)) as c:
            return await send_probe(c, Probe("GET", "/new", 200, "Hello, New Endpoint!"), retries=3)

    result = asyncio.run(go())
    assert result.ok
    assert calls["n"] == 3


def test_send_probe_gives_up():
    def down(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    async def go() -> None:
        async with httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(down)) as c:
            await send_probe(c, Probe("GET", "/", 200), retries=2)

    with pytest.raises(ProbeError):
        asyncio.run(go())


def test_summarize_reports_mismatches():
    good = ProbeResult(Probe("GET", "/", 200, "Hello, CI/CD World!"), 200, "Hello, CI/CD World!", 1.0)
    bad = ProbeResult(Probe("POST", "/", 404), 405, "", 3.0)
    summary, code = summarize([good, bad])
    assert code == 1
    assert summary["passed"] == 1
    assert summary["failures"][0]["status_code"] == 405
    assert summary["timings"]["max_ms"] == 3.0


def test_summarize_empty_is_failure():
    summary, code = summarize([])
    assert code == 1
    assert summary["probes"] == 0


def test_percentile():
    assert percentile([], 0.95) == 0.0
    assert percentile([5.0], 0.95) == 5.0
    assert percentile([0.0, 10.0], 0.5) == 5.0


def test_parse_args_defaults(monkeypatch):
    monkeypatch.setenv("BASE_URL", "http://example.test:9000")
    args = parse_args([])
    assert args.base_url == "http://example.test:9000"
    assert args.retries == 3
    args = parse_args(["--base-url", "http://x", "--timeout", "1.5"])
    assert (args.base_url, args.timeout) == ("http://x", 1.5)


def test_build_probes_pins_greeting_bodies():
    greetings = {p.path: p.expected_body for p in build_probes() if p.expected_status == 200}
    assert greetings == {
        "/": "Hello, CI/CD World!",
        "/new": "Hello, New Endpoint!",
    }


def test_build_probes_agree_with_dispatch():
    for p in build_probes():
        reply = dispatch(p.method, p.path)
        assert (reply.status_code, reply.body) == (p.expected_status, p.expected_body)


def test_not_found_cases_cover_framework_paths():
    assert {("GET", "/docs"), ("GET", "/redoc"), ("GET", "/openapi.json")} <= set(NOT_FOUND_CASES)
    assert {("HEAD", "/"), ("OPTIONS", "/")} <= set(NOT_FOUND_CASES)


def test_smoke_fails_when_extra_path_is_served():
    app = create_app()

    @app.get("/docs")
    async def docs() -> dict:
        return {"docs": True}

    code = asyncio.run(run_smoke(base_url=BASE_URL, transport=_asgi(app)))
    assert code == 1


@pytest.mark.parametrize("value", ["0", "-2", "x"])
def test_parse_args_rejects_bad_retries(value):
    with pytest.raises(SystemExit) as exc:
        parse_args(["--retries", value])
    assert exc.value.code == 2


def test_send_probe_requires_an_attempt():
    async def go() -> None:
        async with httpx.AsyncClient(base_url=BASE_URL, transport=_asgi(create_app())) as c:
            await send_probe(c, Probe("GET", "/", 200), retries=0)

    with pytest.raises(ValueError):
        asyncio.run(go())


def test_run_probes_reports_transport_failures_per_probe():
    def partly_down(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/new":
            raise httpx.ConnectError("down", request=request)
        return httpx.Response(200, text="Hello, CI/CD World!")

    probes = [
        Probe("GET", "/", 200, "Hello, CI/CD World!"),
        Probe("GET", "/new", 200, "Hello, New Endpoint!"),
    ]
    results = asyncio.run(
        run_probes(BASE_URL, probes, retries=2, transport=httpx.MockTransport(partly_down))
    )

    assert [r.probe.path for r in results] == ["/", "/new"]
    assert results[0].ok
    assert not results[1].ok
    assert "down" in results[1].error

    summary, code = summarize(results)
    assert code == 1
    assert summary["failures"][0]["error"] == results[1].error


def test_smoke_returns_failure_when_never_ready():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    code = asyncio.run(
        run_smoke(base_url=BASE_URL, timeout_s=0.3, transport=httpx.MockTransport(refuse))
    )
    assert code == 1
