"""
Module: event.py
Description: Event notification models.

Defines the storage-provider event as received on the notification
endpoint. Only the routing fields are declared; every other field is
kept verbatim so the event can be forwarded to subscribers unchanged.

Key Components:
- Event: One event notification, routed by (bucketName, matchedRuleName)
- NotificationBatch: The {"events": [...]} body of a notification request

Dependencies: pydantic, typing
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class Event(BaseModel):
    """
    Event model representing a single storage event notification.

    Attributes:
        bucket_name: Bucket the event happened in (wire name bucketName)
        matched_rule_name: Notification rule that matched (wire name matchedRuleName)

    Any additional fields (eventType, objectName, ...) are preserved as extras.
    """

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
        populate_by_name=True
    )

    bucket_name: str = Field(
        ...,
        alias="bucketName",
        min_length=1,
        description="Name of the bucket the event belongs to"
    )
    matched_rule_name: str = Field(
        ...,
        alias="matchedRuleName",
        min_length=1,
        description="Name of the event notification rule that matched"
    )

    def to_payload(self) -> Dict[str, Any]:
        """Return the event in its original wire shape."""
        return self.model_dump(by_alias=True)


class NotificationBatch(BaseModel):
    """Request model for an inbound batch of event notifications."""

    model_config = ConfigDict(extra="ignore")

    events: List[Event] = Field(
        ...,
        description="Events in the order they should be processed"
    )
