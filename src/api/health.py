from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/api/health")
async def health_check() -> dict[str, str]:
    """Lightweight liveness check for load balancers and container health checks."""
    return {"status": "ok"}
