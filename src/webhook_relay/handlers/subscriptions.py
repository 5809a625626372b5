"""
Module: subscriptions.py
Description: Subscription management endpoints.

Implements the control plane under /@subscriptions:
- GET/HEAD /@subscriptions[/{bucket}[/{rule}[/{id}]]]: Read subscriptions
- POST /@subscriptions/{bucket}/{rule}: Create a subscription
- PUT /@subscriptions/{bucket}/{rule}: Replace a rule's subscriptions
- DELETE /@subscriptions/{bucket}/{rule}/{id}: Delete a subscription

Any other /@ resource is not found; any other method on a
subscriptions path is not allowed.

Dependencies: FastAPI, registry, models, auth
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse, Response

from webhook_relay.auth.signature import require_signed_request
from webhook_relay.exceptions import MethodNotAllowedError, NotFoundError
from webhook_relay.handlers.dependencies import get_registry
from webhook_relay.models.subscription import CreateSubscriptionRequest, CreateSubscriptionResponse
from webhook_relay.registry.subscriptions import SubscriptionRegistry
from webhook_relay.utils.logger import get_logger

RESOURCE = "subscriptions"
READ_METHODS = ["GET", "HEAD"]
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]

router = APIRouter(
    prefix=f"/@{RESOURCE}",
    tags=["subscriptions"],
    dependencies=[Depends(require_signed_request)]
)
resource_router = APIRouter(
    tags=["subscriptions"],
    dependencies=[Depends(require_signed_request)]
)
logger = get_logger(__name__)


async def _read(
    request: Request,
    registry: SubscriptionRegistry,
    bucket_name: Optional[str] = None,
    rule_name: Optional[str] = None,
    subscription_id: Optional[str] = None
) -> Response:
    logger.info(
        "Handling subscription read",
        method=request.method,
        bucket_name=bucket_name,
        rule_name=rule_name,
        subscription_id=subscription_id
    )
    result = await registry.get(bucket_name, rule_name, subscription_id)
    if request.method == "HEAD":
        return Response(status_code=200)
    return JSONResponse(content=result)


@router.api_route("", methods=READ_METHODS)
async def get_all_subscriptions(
    request: Request,
    registry: SubscriptionRegistry = Depends(get_registry)
) -> Response:
    """Return every bucket's rules and subscriptions."""
    return await _read(request, registry)


@router.api_route("/{bucket_name}", methods=READ_METHODS)
async def get_bucket_subscriptions(
    request: Request,
    bucket_name: str,
    registry: SubscriptionRegistry = Depends(get_registry)
) -> Response:
    """Return one bucket's rules."""
    return await _read(request, registry, bucket_name)


@router.api_route("/{bucket_name}/{rule_name}", methods=READ_METHODS)
async def get_rule_subscriptions(
    request: Request,
    bucket_name: str,
    rule_name: str,
    registry: SubscriptionRegistry = Depends(get_registry)
) -> Response:
    """Return one rule's subscriptions, keyed by subscription id."""
    return await _read(request, registry, bucket_name, rule_name)


@router.api_route("/{bucket_name}/{rule_name}/{subscription_id}", methods=READ_METHODS)
async def get_subscription(
    request: Request,
    bucket_name: str,
    rule_name: str,
    subscription_id: str,
    registry: SubscriptionRegistry = Depends(get_registry)
) -> Response:
    """Return a single subscription."""
    return await _read(request, registry, bucket_name, rule_name, subscription_id)


@router.post("/{bucket_name}/{rule_name}", response_model=CreateSubscriptionResponse)
async def create_subscription(
    bucket_name: str,
    rule_name: str,
    request: CreateSubscriptionRequest,
    registry: SubscriptionRegistry = Depends(get_registry)
) -> CreateSubscriptionResponse:
    """
    Subscribe a webhook URL to a bucket's rule.

    Example:
        POST /@subscriptions/my-bucket/new-uploads
        {"url": "https://example.com/hook"}

        Response (200):
        {"id": "2bdd4246-d838-4c0a-9a50-a7483534836e"}
    """
    subscription_id = await registry.create(bucket_name, rule_name, request.url)
    return CreateSubscriptionResponse(id=subscription_id)


@router.put("/{bucket_name}/{rule_name}")
async def replace_rule_subscriptions(
    bucket_name: str,
    rule_name: str,
    subscriptions: Dict[str, Any] = Body(...),
    registry: SubscriptionRegistry = Depends(get_registry)
) -> Response:
    """
    Replace every subscription of an existing bucket's rule.

    The body maps subscription ids (UUID v4) to {"url": ...} objects.
    """
    await registry.replace_rule(bucket_name, rule_name, subscriptions)
    return Response(status_code=200)


@router.delete("/{bucket_name}/{rule_name}/{subscription_id}")
async def delete_subscription(
    bucket_name: str,
    rule_name: str,
    subscription_id: str,
    registry: SubscriptionRegistry = Depends(get_registry)
) -> Dict[str, Any]:
    """Delete a subscription and return it."""
    return await registry.delete(bucket_name, rule_name, subscription_id)


@resource_router.api_route("/@{target:path}", methods=ALL_METHODS)
async def unsupported_control_request(request: Request, target: str) -> Response:
    """Reject control requests no endpoint above handles."""
    resource = target.split("/")[0]
    if resource != RESOURCE:
        raise NotFoundError(f"Bad resource @{resource}")
    if request.method in READ_METHODS:
        raise NotFoundError(f"No such path {request.url.path}")
    raise MethodNotAllowedError(f"{request.method} not allowed for {request.url.path}")
