"""
Module: test_store.py
Description: Unit tests for the DynamoDB subscription store.

Tests SubscriptionStore get/put/delete/list against a moto-mocked
table, including JSON preservation and ClientError propagation.
"""

import pytest
from unittest.mock import patch
from botocore.exceptions import ClientError

from webhook_relay.storage.dynamodb import SubscriptionStore


RECORD = {
    "r1": {
        "2bdd4246-d838-4c0a-9a50-a7483534836e": {"url": "https://ex.com/hook"}
    }
}


class TestSubscriptionStore:
    """Test cases for SubscriptionStore operations."""

    def test_store_initialization_invalid_table_name(self):
        """Test SubscriptionStore with invalid table name."""
        with pytest.raises(ValueError, match="table_name must be a non-empty string"):
            SubscriptionStore(table_name="")

        with pytest.raises(ValueError, match="table_name must be a non-empty string"):
            SubscriptionStore(table_name=None)

    @pytest.mark.asyncio
    async def test_get_missing_bucket(self, store):
        """Test get returns None for a bucket without a record."""
        assert await store.get("nope") is None

    @pytest.mark.asyncio
    async def test_put_then_get(self, store, subscriptions_table):
        """Test a stored record is returned unchanged."""
        await store.put("b1", RECORD)

        assert await store.get("b1") == RECORD

        # Stored as a JSON string under the bucket key
        item = subscriptions_table.get_item(Key={'bucket_name': 'b1'})['Item']
        assert isinstance(item['rules'], str)

    @pytest.mark.asyncio
    async def test_put_replaces_record(self, store):
        """Test put overwrites the whole record."""
        await store.put("b1", RECORD)
        await store.put("b1", {"r2": {}})

        assert await store.get("b1") == {"r2": {}}

    @pytest.mark.asyncio
    async def test_delete(self, store):
        """Test delete removes the bucket key."""
        await store.put("b1", RECORD)
        await store.delete("b1")

        assert await store.get("b1") is None

    @pytest.mark.asyncio
    async def test_delete_missing_bucket_is_noop(self, store):
        """Test deleting a missing key does not raise."""
        await store.delete("nope")

    @pytest.mark.asyncio
    async def test_list(self, store):
        """Test list returns every record keyed by bucket name."""
        await store.put("b1", RECORD)
        await store.put("b2", {"r9": {"6f1c1f44-2f0e-4b8e-9b8a-1f2e3d4c5b6a": {"url": "http://x.io"}}})

        records = await store.list()

        assert set(records) == {"b1", "b2"}
        assert records["b1"] == RECORD

    @pytest.mark.asyncio
    async def test_list_empty(self, store):
        """Test list on an empty table."""
        assert await store.list() == {}

    @pytest.mark.asyncio
    async def test_get_dynamodb_error(self, store):
        """Test get re-raises DynamoDB errors."""
        with patch.object(store.table, 'get_item', side_effect=ClientError(
            error_response={'Error': {'Code': 'ProvisionedThroughputExceededException', 'Message': 'Slow down'}},
            operation_name='GetItem'
        )):
            with pytest.raises(ClientError):
                await store.get("b1")

    @pytest.mark.asyncio
    async def test_put_dynamodb_error(self, store):
        """Test put re-raises DynamoDB errors."""
        with patch.object(store.table, 'put_item', side_effect=ClientError(
            error_response={'Error': {'Code': 'ValidationException', 'Message': 'Test error'}},
            operation_name='PutItem'
        )):
            with pytest.raises(ClientError):
                await store.put("b1", RECORD)
