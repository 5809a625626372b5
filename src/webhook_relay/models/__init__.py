"""
Module: models
Description: Package initialization for Pydantic data models.

This package contains the data models used by the webhook relay:
- Event / NotificationBatch: Inbound event notifications
- Subscription models and identifier/URL validation
- ErrorResponse: Error envelope for API responses
"""

from .event import Event, NotificationBatch
from .response import ErrorDetail, ErrorResponse
from .subscription import (
    CreateSubscriptionRequest,
    CreateSubscriptionResponse,
    Subscription,
    validate_subscription_id,
    validate_subscription_url,
)

__all__ = [
    "Event",
    "NotificationBatch",
    "ErrorDetail",
    "ErrorResponse",
    "CreateSubscriptionRequest",
    "CreateSubscriptionResponse",
    "Subscription",
    "validate_subscription_id",
    "validate_subscription_url",
]
