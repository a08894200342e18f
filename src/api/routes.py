"""Service-level routes."""

from __future__ import annotations

from fastapi import APIRouter

router = APIRouter()

SERVICE_NAME = "PawPing"


@router.get("/")
async def health() -> dict[str, str]:
    return {"status": "ok", "service": SERVICE_NAME}
