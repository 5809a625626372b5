"""
Module: storage
Description: Package initialization for the data persistence layer.

This package contains the durable store used by the relay:
- dynamodb: DynamoDB store holding one record per bucket
"""

from .dynamodb import BucketRecord, SubscriptionStore

__all__ = ["BucketRecord", "SubscriptionStore"]
