from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "Hello World!"


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
