from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import PlainTextResponse

from ..service import greeting_service
from ..service.greeting_service import GreetingNotFound

router = APIRouter(default_response_class=PlainTextResponse)


def _greet(path: str) -> str:
    try:
        return greeting_service.get_greeting(path=path)
    except GreetingNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)


@router.get("/", summary="Root greeting")
async def root() -> str:
    """Return the root greeting as plain text."""
    return _greet("/")


@router.get("/new", summary="New endpoint greeting")
async def new_endpoint() -> str:
    """Return the greeting of the newer endpoint."""
    return _greet("/new")
