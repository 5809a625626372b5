"""
Module: conftest.py
Description: Shared pytest fixtures for webhook relay tests.

Provides a moto-backed DynamoDB subscriptions table, store and registry
instances, sample events, and a recording sleep so retry backoff can be
asserted without waiting.
"""

import os

# Settings are read at import time; configure the environment first.
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("SIGNING_SECRET", "test-signing-secret")
os.environ.setdefault("SUBSCRIPTIONS_TABLE_NAME", "test-subscriptions-table")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import boto3
import pytest
from moto import mock_aws

from webhook_relay.models.event import Event
from webhook_relay.registry.subscriptions import SubscriptionRegistry
from webhook_relay.storage.dynamodb import SubscriptionStore

TABLE_NAME = "test-subscriptions-table"
REGION = "us-east-1"


class RecordingSleep:
    """Async stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


def make_event(bucket_name="b1", rule_name="r1", **extra):
    """Build an Event the way the storage provider sends it."""
    data = {
        "bucketName": bucket_name,
        "matchedRuleName": rule_name,
        "eventType": "b2:ObjectCreated:Upload",
        "objectName": "photos/cat.jpg",
    }
    data.update(extra)
    return Event.model_validate(data)


@pytest.fixture
def subscriptions_table():
    """
    Create mock DynamoDB table for subscriptions.

    Uses moto to mock AWS DynamoDB with the production key schema.
    """
    with mock_aws():
        dynamodb = boto3.resource('dynamodb', region_name=REGION)

        table = dynamodb.create_table(
            TableName=TABLE_NAME,
            KeySchema=[
                {
                    'AttributeName': 'bucket_name',
                    'KeyType': 'HASH'
                }
            ],
            AttributeDefinitions=[
                {
                    'AttributeName': 'bucket_name',
                    'AttributeType': 'S'
                }
            ],
            BillingMode='PAY_PER_REQUEST'
        )

        yield table


@pytest.fixture
def store(subscriptions_table):
    """Provide a SubscriptionStore bound to the mocked table."""
    return SubscriptionStore(table_name=TABLE_NAME, region_name=REGION)


@pytest.fixture
def registry(store):
    """Provide a SubscriptionRegistry over the mocked store."""
    return SubscriptionRegistry(store)


@pytest.fixture
def recording_sleep():
    """Provide a sleep function that records delays instead of waiting."""
    return RecordingSleep()


@pytest.fixture
def sample_event():
    """Provide a typical object-created event for bucket b1, rule r1."""
    return make_event()


@pytest.fixture
def event_factory():
    """Provide a factory building events for any bucket and rule."""
    return make_event
