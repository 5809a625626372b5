"""
Module: notifications.py
Description: Event notification endpoint.

Any POST outside the /@ control namespace is an event notification
batch. The batch is acknowledged immediately with 200 and delivered to
subscribers in a background task, so the sender never sees the outcome
of downstream deliveries.

Dependencies: FastAPI, delivery engine, models, auth
"""

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import Response

from webhook_relay.auth.signature import require_signed_request
from webhook_relay.config.settings import settings
from webhook_relay.delivery.engine import DeliveryEngine
from webhook_relay.handlers.dependencies import get_delivery_engine
from webhook_relay.models.event import NotificationBatch
from webhook_relay.utils.logger import get_logger

router = APIRouter(
    tags=["notifications"],
    dependencies=[Depends(require_signed_request)]
)
logger = get_logger(__name__)


@router.post("/{path:path}")
async def receive_notifications(
    batch: NotificationBatch,
    background_tasks: BackgroundTasks,
    engine: DeliveryEngine = Depends(get_delivery_engine)
) -> Response:
    """
    Accept a batch of event notifications for delivery.

    Example:
        POST /
        {"events": [{"bucketName": "my-bucket", "matchedRuleName": "new-uploads", ...}]}

        Response (200): empty body
    """
    logger.info("Received notification batch", count=len(batch.events))

    background_tasks.add_task(
        engine.handle_notifications,
        batch.events,
        settings.max_failure_count
    )

    return Response(status_code=200)
