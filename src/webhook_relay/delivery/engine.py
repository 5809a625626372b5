"""
Module: delivery/engine.py
Description: Fan-out of event notifications to subscribers.

Events in a batch are processed one after another. For each event the
subscribers of its (bucket, rule) are delivered to concurrently, and
every subscriber whose delivery exhausts its retry budget is removed
from the registry. Nothing is reported back to the caller: by the time
the engine runs, the notification has already been acknowledged.

Key Components:
- DeliveryEngine.handle_notifications(): Process one inbound batch
- Failure-triggered unsubscription
- Optional CloudWatch delivery metrics

Dependencies: asyncio, registry, delivery.push, delivery.retry
"""

import asyncio
from typing import Any, Dict, Optional, Sequence

from webhook_relay.delivery.push import WebhookDeliveryClient
from webhook_relay.delivery.retry import retry_delivery
from webhook_relay.exceptions import NotFoundError
from webhook_relay.models.event import Event
from webhook_relay.registry.subscriptions import SubscriptionRegistry
from webhook_relay.utils.logger import get_logger
from webhook_relay.utils.metrics import MetricsClient


class DeliveryEngine:
    """
    Delivers event notifications to every subscriber of their rule.

    Attributes:
        registry: Subscription registry, read for lookups and used for pruning
        delivery_client: Client making single delivery attempts
        metrics_client: Optional CloudWatch metrics client
        logger: Structured logger
    """

    def __init__(
        self,
        registry: SubscriptionRegistry,
        delivery_client: WebhookDeliveryClient,
        metrics_client: Optional[MetricsClient] = None,
        logger=None,
        sleep=asyncio.sleep
    ):
        self.registry = registry
        self.delivery_client = delivery_client
        self.metrics_client = metrics_client
        self.logger = logger or get_logger(__name__)
        self._sleep = sleep

    async def handle_notifications(self, events: Sequence[Event], max_failure_count: int) -> None:
        """
        Deliver a batch of events, in order.

        Event N+1 is not looked up until every delivery for event N has
        settled and failed subscribers have been removed. A registry lookup
        error other than NotFoundError abandons the rest of the batch.

        Args:
            events: Events in the order they were received
            max_failure_count: Delivery attempts per subscriber before it
                is unsubscribed
        """
        self.logger.info("Handling batch of notifications", count=len(events))

        try:
            for index, event in enumerate(events):
                try:
                    subscriptions = await self.registry.get(
                        event.bucket_name, event.matched_rule_name
                    )
                except NotFoundError:
                    subscriptions = {}
                except Exception as e:
                    self.logger.error(
                        "Error getting subscriptions, abandoning batch",
                        bucket_name=event.bucket_name,
                        rule_name=event.matched_rule_name,
                        skipped_events=len(events) - index,
                        error=str(e),
                        error_type=type(e).__name__
                    )
                    return

                if not subscriptions:
                    self.logger.info(
                        "No subscribers",
                        bucket_name=event.bucket_name,
                        rule_name=event.matched_rule_name
                    )
                    continue

                await self._fan_out(event, subscriptions, max_failure_count)

        except Exception:
            self.logger.exception("Unexpected error handling notifications")

    async def _fan_out(
        self,
        event: Event,
        subscriptions: Dict[str, Dict[str, Any]],
        max_failure_count: int
    ) -> None:
        sent = list(subscriptions.items())

        outcomes = await asyncio.gather(
            *(
                retry_delivery(
                    self.delivery_client.deliver_event,
                    subscription['url'],
                    event,
                    max_failure_count,
                    sleep=self._sleep
                )
                for _, subscription in sent
            ),
            return_exceptions=True
        )

        for (subscription_id, subscription), outcome in zip(sent, outcomes):
            if outcome is True:
                self._put_metric("DeliverySucceeded", event)
                continue

            if isinstance(outcome, BaseException):
                self.logger.error(
                    "Unexpected delivery error",
                    url=subscription['url'],
                    error=str(outcome),
                    error_type=type(outcome).__name__
                )

            self._put_metric("DeliveryFailed", event)
            await self._unsubscribe(event, subscription_id, subscription)

    async def _unsubscribe(
        self,
        event: Event,
        subscription_id: str,
        subscription: Dict[str, Any]
    ) -> None:
        self.logger.warning(
            "Removing subscription",
            subscription_id=subscription_id,
            url=subscription['url'],
            bucket_name=event.bucket_name,
            rule_name=event.matched_rule_name
        )

        try:
            await self.registry.delete(event.bucket_name, event.matched_rule_name, subscription_id)
        except Exception as e:
            # Another batch may already have removed it
            self.logger.warning(
                "Failed to remove subscription",
                subscription_id=subscription_id,
                bucket_name=event.bucket_name,
                rule_name=event.matched_rule_name,
                error=str(e)
            )
            return

        self._put_metric("SubscriptionRemoved", event)

    def _put_metric(self, metric_name: str, event: Event) -> None:
        if self.metrics_client is None:
            return
        self.metrics_client.put_metric(
            metric_name=metric_name,
            value=1.0,
            dimensions={'BucketName': event.bucket_name}
        )
