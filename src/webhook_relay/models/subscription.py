"""
Module: subscription.py
Description: Subscription data models and identifier/URL validation.

A subscription is stored as {"url": "<absolute-url>"} under a UUID v4
identifier inside its rule. The helpers here are shared by the
registry (which owns validation) and the request models.

Key Components:
- Subscription: Wire/storage shape of a single subscription
- CreateSubscriptionRequest: Body of POST /@subscriptions/{bucket}/{rule}
- CreateSubscriptionResponse: {"id": "<uuid>"}
- validate_subscription_url(), validate_subscription_id()

Dependencies: pydantic, httpx, re
"""

import re
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from webhook_relay.exceptions import ValidationError

UUID4_PATTERN = re.compile(
    r'^[0-9A-F]{8}-[0-9A-F]{4}-4[0-9A-F]{3}-[89AB][0-9A-F]{3}-[0-9A-F]{12}$',
    re.IGNORECASE
)

ALLOWED_URL_SCHEMES = ('http', 'https')


def validate_subscription_url(url: Any) -> str:
    """
    Check that url is a non-empty, absolute HTTP(S) URL.

    Args:
        url: Candidate delivery target

    Returns:
        The url, unchanged

    Raises:
        ValidationError: If url is missing, unparseable or not absolute
    """
    if not url or not isinstance(url, str):
        raise ValidationError("No url in payload.")

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        raise ValidationError(f"url in payload is not valid: {url}")

    if not parsed.is_absolute_url or parsed.scheme not in ALLOWED_URL_SCHEMES:
        raise ValidationError(f"url in payload is not valid: {url}")

    return url


def validate_subscription_id(subscription_id: Any) -> str:
    """Raise ValidationError unless subscription_id is a UUID v4 string."""
    if not isinstance(subscription_id, str) or not UUID4_PATTERN.match(subscription_id):
        raise ValidationError(f"Bad UUID: {subscription_id}")
    return subscription_id


class Subscription(BaseModel):
    """
    A single webhook target registered under a (bucket, rule).

    Attributes:
        url: Absolute URL events are POSTed to
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    url: str = Field(..., description="Delivery target URL")


class CreateSubscriptionRequest(Subscription):
    """Request model for creating a subscription. Unknown fields are ignored."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class CreateSubscriptionResponse(BaseModel):
    """Response returned after a subscription is created."""

    id: str = Field(..., description="Generated subscription identifier")
