"""
Health check endpoint.

Reports whether the catalog loaded and how many tokens it holds.
No authentication required.
"""

import time

from fastapi import APIRouter

router = APIRouter()


def get_state():
    from ..main import state
    return state


@router.get("/health")
async def health_check():
    state = get_state()
    now = time.time()

    response = {
        "status": "healthy",
        "version": state.version,
        "uptime_seconds": round(now - state.start_time, 2) if state.start_time else 0,
    }

    try:
        catalog = state.get_catalog()
        response["catalog"] = {"loaded": True, "tokens": catalog.stats()}
    except Exception as e:
        response["status"] = "unhealthy"
        response["catalog"] = {"loaded": False, "error": str(e)}

    return response
