"""
Module: dependencies.py
Description: FastAPI dependencies shared by the relay routers.

The registry serializes bucket record mutations with an in-process
lock, so one registry instance is shared by every request and every
background notification task.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends

from webhook_relay.config.settings import settings
from webhook_relay.delivery.engine import DeliveryEngine
from webhook_relay.delivery.push import WebhookDeliveryClient
from webhook_relay.registry.subscriptions import SubscriptionRegistry
from webhook_relay.storage.dynamodb import SubscriptionStore
from webhook_relay.utils.metrics import MetricsClient


@lru_cache(maxsize=None)
def get_registry() -> SubscriptionRegistry:
    """Dependency returning the process-wide subscription registry."""
    store = SubscriptionStore(
        table_name=settings.subscriptions_table_name,
        region_name=settings.aws_region
    )
    return SubscriptionRegistry(store)


def get_metrics_client() -> Optional[MetricsClient]:
    """Dependency returning a CloudWatch metrics client, if metrics are enabled."""
    if not settings.metrics_enabled:
        return None
    return MetricsClient(region_name=settings.aws_region)


def get_delivery_engine(
    registry: SubscriptionRegistry = Depends(get_registry),
    metrics_client: Optional[MetricsClient] = Depends(get_metrics_client)
) -> DeliveryEngine:
    """
    Dependency to get the delivery engine.

    Returns:
        DeliveryEngine bound to the shared registry and configured
        with the per-attempt delivery timeout
    """
    return DeliveryEngine(
        registry=registry,
        delivery_client=WebhookDeliveryClient(timeout_seconds=settings.delivery_timeout),
        metrics_client=metrics_client
    )
