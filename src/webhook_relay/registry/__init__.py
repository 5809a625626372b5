"""
Module: registry
Description: Subscription registry built on the bucket record store.
"""

from .subscriptions import SubscriptionRegistry

__all__ = ["SubscriptionRegistry"]
