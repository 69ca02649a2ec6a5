from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Probe:
    """One request the runner issues, with the reply it expects."""

    method: str
    path: str
    expected_status: int
    expected_body: str | None = None


@dataclass
class ProbeResult:
    """What came back for a probe."""

    probe: Probe
    status_code: int
    body: str
    elapsed_ms: float
    error: str | None = None

    @property
    def ok(self) -> bool:
        if self.error is not None:
            return False
        if self.status_code != self.probe.expected_status:
            return False
        if self.probe.expected_body is None:
            return True
        return self.body == self.probe.expected_body


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed."""


class NotReadyError(SmokeError):
    """Raised when the service never answers its root route within the timeout."""


class ProbeError(SmokeError):
    """Raised when a probe fails at transport level after retries."""
