from __future__ import annotations

from fastapi import APIRouter

from authguard.core.rate_limit import get_rate_limiter

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Health check endpoint.

    Returns:
        dict: ``status`` plus the number of identifiers the limiter tracks.
    """

    return {"status": "ok", "rate_limit_tracked": len(get_rate_limiter())}
