from __future__ import annotations

from ..domain.greetings import lookup
from ..logging_conf import get_logger

logger = get_logger("service.greeting")


class GreetingNotFound(LookupError):
    """Raised when no greeting is registered for a path."""

    def __init__(self, path: str) -> None:
        super().__init__(path)
        self.path = path


def get_greeting(*, path: str) -> str:
    """Return the greeting for a registered path."""
    body = lookup(path)
    if body is None:
        raise GreetingNotFound(path)
    logger.info("greeting.served", extra={"event": "greeting_served", "route": path})
    return body
