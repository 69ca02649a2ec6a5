from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

__all__ = [
    "GREETINGS",
    "ALLOWED_METHOD",
    "Reply",
    "lookup",
    "dispatch",
]

ALLOWED_METHOD = "GET"

# Built once at import; read-only for the life of the process.
GREETINGS: Mapping[str, str] = MappingProxyType(
    {
        "/": "Hello, CI/CD World!",
        "/new": "Hello, New Endpoint!",
    }
)


class Reply(BaseModel):
    """Outcome of dispatching a single request."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    body: str | None = None


def lookup(path: str) -> str | None:
    """Return the greeting registered for `path`, or None."""
    return GREETINGS.get(path)


def dispatch(method: str, path: str) -> Reply:
    """Map (method, path) to a reply.

    - GET on a registered path -> 200 with its greeting
    - anything else -> 404, no body

    Paths are matched exactly; "/new/" is not "/new".
    """
    body = lookup(path)
    if method.strip().upper() != ALLOWED_METHOD or body is None:
        return Reply(status_code=404)
    return Reply(status_code=200, body=body)
