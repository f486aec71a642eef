"""Ingestion API routes."""

import json
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from ...app import IApplication
from ...errors import QueueClosedError
from ...logging_config import get_logger
from ...models import QueuedPayload

logger = get_logger(__name__)


def create_ingestion_router(app: IApplication) -> APIRouter:
    """Create ingestion router."""
    router = APIRouter(tags=["ingestion"])

    @router.post("/receive-json")
    async def receive_json(request: Request) -> Response:
        """Accept a JSON event and queue it for delivery without waiting."""
        body = await request.body()
        try:
            payload = json.loads(body)
        except ValueError:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": "Cannot parse JSON"},
            )

        item = QueuedPayload(
            id=str(uuid.uuid4()),
            payload=payload,
            received_at=datetime.now(timezone.utc),
        )
        try:
            await app.queue.put(item)
        except QueueClosedError:
            logger.warning("Rejected payload %s: relay is shutting down", item.id)
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"error": "Relay is shutting down"},
            )

        logger.debug("Queued payload %s", item.id)
        return Response(status_code=status.HTTP_200_OK)

    return router
