"""Greeting Dispatcher: a two-route plain-text HTTP service."""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cicd-greeter")
except PackageNotFoundError:  # pragma: no cover - running from a bare checkout
    __version__ = "0.0.0"
