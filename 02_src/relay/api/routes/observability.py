"""Observability API routes."""

from pydantic import BaseModel
from fastapi import APIRouter

from ...app import IApplication


class StatsResponse(BaseModel):
    """Response model for relay counters."""

    queue_depth: int
    queue_maxsize: int
    worker_running: bool
    received: int
    sent: int
    decode_failed: int
    delivery_failed: int
    failed: int
    abandoned: int


def create_observability_router(app: IApplication) -> APIRouter:
    """Create observability router."""
    router = APIRouter(prefix="/api", tags=["observability"])

    @router.get("/stats", response_model=StatsResponse)
    async def get_stats() -> dict:
        """Queue depth and per-outcome counters of the delivery worker."""
        return {
            "queue_depth": app.queue.qsize(),
            "queue_maxsize": app.queue.maxsize,
            "worker_running": app.worker.running,
            **app.worker.stats.as_dict(),
        }

    return router
