"""
Module: subscriptions.py
Description: Subscription registry over the bucket record store.

The registry owns the bucket -> rule -> subscription hierarchy: it
validates input, generates subscription identifiers, and keeps the
"never persist an empty rule or bucket record" invariant. Every
mutation reads the whole bucket record, changes it and writes it back.

Key Components:
- SubscriptionRegistry.create(): Register a webhook for (bucket, rule)
- SubscriptionRegistry.get(): Hierarchical read of subscriptions
- SubscriptionRegistry.replace_rule(): Bulk overwrite of one rule
- SubscriptionRegistry.delete(): Remove one subscription, pruning empties

Dependencies: asyncio, uuid, storage, models
"""

import asyncio
from typing import Any, Dict, Optional
from uuid import uuid4

from webhook_relay.exceptions import NotFoundError, ValidationError
from webhook_relay.models.subscription import validate_subscription_id, validate_subscription_url
from webhook_relay.storage.dynamodb import SubscriptionStore
from webhook_relay.utils.logger import get_logger


class SubscriptionRegistry:
    """
    CRUD operations over bucket records held in a SubscriptionStore.

    A registry instance serializes its read-modify-write sequences with
    an asyncio.Lock, so the application must share one instance per
    store. Reads take no lock and see the store as of the read.

    Attributes:
        store: Durable store of bucket records
        logger: Structured logger

    Example:
        >>> registry = SubscriptionRegistry(SubscriptionStore("webhook-relay-subscriptions"))
        >>> subscription_id = await registry.create("b1", "r1", "https://ex.com/hook")
        >>> await registry.get("b1", "r1", subscription_id)
        {'url': 'https://ex.com/hook'}
    """

    def __init__(self, store: SubscriptionStore, logger=None):
        self.store = store
        self.logger = logger or get_logger(__name__)
        self._lock = asyncio.Lock()

    async def create(self, bucket_name: str, rule_name: str, url: str) -> str:
        """
        Register a new subscription and return its generated identifier.

        Creates the bucket record and the rule if they do not exist yet.

        Raises:
            ValidationError: If url is empty or not an absolute HTTP(S) URL
        """
        validate_subscription_url(url)

        async with self._lock:
            rules = await self.store.get(bucket_name) or {}
            subscriptions = rules.setdefault(rule_name, {})
            subscription_id = str(uuid4())
            subscriptions[subscription_id] = {'url': url}
            await self.store.put(bucket_name, rules)

        self.logger.info(
            "Created subscription",
            bucket_name=bucket_name,
            rule_name=rule_name,
            subscription_id=subscription_id,
            url=url
        )

        return subscription_id

    async def get(
        self,
        bucket_name: Optional[str] = None,
        rule_name: Optional[str] = None,
        subscription_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Walk the hierarchy as deep as the supplied arguments reach.

        Args:
            bucket_name: None returns every bucket record
            rule_name: None returns the bucket's rule map
            subscription_id: None returns the rule's subscription map,
                otherwise the single subscription

        Raises:
            NotFoundError: If the addressed bucket, rule or subscription is absent
        """
        if not bucket_name:
            self.logger.debug("Returning rules for all buckets")
            return await self.store.list()

        rules = await self.store.get(bucket_name)
        if not rules:
            raise NotFoundError(f"No rules found for {bucket_name}")
        if not rule_name:
            self.logger.debug("Returning rules", bucket_name=bucket_name)
            return rules

        if rule_name not in rules:
            raise NotFoundError(f"Rule {rule_name} not found for {bucket_name}")
        subscriptions = rules[rule_name]
        if not subscription_id:
            self.logger.debug(
                "Returning subscriptions",
                bucket_name=bucket_name,
                rule_name=rule_name
            )
            return subscriptions

        if subscription_id not in subscriptions:
            raise NotFoundError(
                f"ID {subscription_id} not found for {bucket_name}/{rule_name}"
            )
        return subscriptions[subscription_id]

    async def replace_rule(
        self,
        bucket_name: str,
        rule_name: str,
        subscriptions: Dict[str, Any]
    ) -> None:
        """
        Overwrite the subscription map of one rule.

        Everything is validated before the store is touched, so a rejected
        call leaves the previous state in place. An empty map removes the
        rule, and the bucket record with it if no rules remain.

        Raises:
            ValidationError: If an identifier is not a UUID v4 or a
                subscription lacks a valid url
            NotFoundError: If the bucket has no record
        """
        if not isinstance(subscriptions, dict):
            raise ValidationError("Subscriptions must be an object keyed by subscription id")

        replacement = {}
        for subscription_id, subscription in subscriptions.items():
            validate_subscription_id(subscription_id)
            if not isinstance(subscription, dict) or 'url' not in subscription:
                raise ValidationError(
                    f"Missing url property in subscription object for {subscription_id}"
                )
            replacement[subscription_id] = {'url': validate_subscription_url(subscription['url'])}

        async with self._lock:
            rules = await self.store.get(bucket_name)
            if not rules:
                raise NotFoundError(f"No rules found for {bucket_name}")

            if replacement:
                rules[rule_name] = replacement
            else:
                rules.pop(rule_name, None)

            if rules:
                await self.store.put(bucket_name, rules)
            else:
                await self.store.delete(bucket_name)

        self.logger.info(
            "Updated subscriptions",
            bucket_name=bucket_name,
            rule_name=rule_name,
            count=len(replacement)
        )

    async def delete(self, bucket_name: str, rule_name: str, subscription_id: str) -> Dict[str, Any]:
        """
        Remove one subscription and return it.

        An emptied rule is removed from its bucket record; an emptied bucket
        record is deleted from the store instead of being written back.

        Raises:
            NotFoundError: If the bucket, rule or subscription is absent
        """
        async with self._lock:
            rules = await self.store.get(bucket_name)
            if not rules:
                raise NotFoundError(f"No subscriptions for {bucket_name}")
            if rule_name not in rules:
                raise NotFoundError(f"Rule {rule_name} not found for {bucket_name}")

            subscriptions = rules[rule_name]
            if subscription_id not in subscriptions:
                raise NotFoundError(
                    f"ID {subscription_id} not found for {bucket_name}/{rule_name}"
                )

            deleted = subscriptions.pop(subscription_id)
            self.logger.info(
                "Deleted subscription",
                bucket_name=bucket_name,
                rule_name=rule_name,
                subscription_id=subscription_id
            )

            if not subscriptions:
                self.logger.info(
                    "No more subscriptions in rule",
                    bucket_name=bucket_name,
                    rule_name=rule_name
                )
                del rules[rule_name]

            if rules:
                await self.store.put(bucket_name, rules)
            else:
                self.logger.info("No more rules in bucket", bucket_name=bucket_name)
                await self.store.delete(bucket_name)

        return deleted
