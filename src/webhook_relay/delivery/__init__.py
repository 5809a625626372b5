"""
Package: delivery
Description: Event delivery mechanisms for the webhook relay.

Provides single-attempt webhook delivery, the retry/backoff policy,
and the fan-out engine that prunes subscribers whose deliveries
keep failing.
"""

from .engine import DeliveryEngine
from .push import WebhookDeliveryClient
from .retry import retry_delivery

__all__ = ["DeliveryEngine", "WebhookDeliveryClient", "retry_delivery"]
