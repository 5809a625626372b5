"""
Module: test_engine.py
Description: Unit tests for the notification fan-out engine.

Runs DeliveryEngine against a moto-backed registry with pytest-httpx
subscriber endpoints and a recording sleep, covering pruning of
failing subscribers, partial failure and batch ordering.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from webhook_relay.delivery.engine import DeliveryEngine
from webhook_relay.delivery.push import WebhookDeliveryClient
from webhook_relay.exceptions import DeliveryError, NotFoundError

GOOD_URL = "https://good.example.com/hook"
BAD_URL = "https://bad.example.com/hook"


@pytest.fixture
def engine(registry, recording_sleep):
    """Provide a DeliveryEngine that never actually sleeps."""
    return DeliveryEngine(
        registry=registry,
        delivery_client=WebhookDeliveryClient(timeout_seconds=1),
        sleep=recording_sleep
    )


class TestDeliveryEngine:
    """Test cases for DeliveryEngine.handle_notifications."""

    @pytest.mark.asyncio
    async def test_failing_subscriber_is_removed(self, engine, registry, httpx_mock, sample_event, recording_sleep):
        """Test an always-500 endpoint gets exactly N attempts, then is unsubscribed."""
        subscription_id = await registry.create("b1", "r1", BAD_URL)
        for _ in range(3):
            httpx_mock.add_response(url=BAD_URL, method="POST", status_code=500)

        await engine.handle_notifications([sample_event], max_failure_count=3)

        assert len(httpx_mock.get_requests(url=BAD_URL)) == 3
        assert recording_sleep.delays == [0, 1]
        with pytest.raises(NotFoundError):
            await registry.get("b1", "r1", subscription_id)

    @pytest.mark.asyncio
    async def test_successful_subscriber_is_kept(self, engine, registry, httpx_mock, sample_event, recording_sleep):
        subscription_id = await registry.create("b1", "r1", GOOD_URL)
        httpx_mock.add_response(url=GOOD_URL, method="POST", status_code=200)

        await engine.handle_notifications([sample_event], max_failure_count=5)

        request = httpx_mock.get_requests(url=GOOD_URL)[0]
        assert json.loads(request.content) == {"event": [sample_event.to_payload()]}
        assert recording_sleep.delays == []
        assert await registry.get("b1", "r1", subscription_id) == {"url": GOOD_URL}

    @pytest.mark.asyncio
    async def test_partial_failure(self, engine, registry, httpx_mock, event_factory):
        """Test one failing subscriber does not affect its sibling or the next event."""
        good = await registry.create("b1", "r1", GOOD_URL)
        bad = await registry.create("b1", "r1", BAD_URL)
        other = await registry.create("b2", "r2", "https://other.example.com/hook")

        httpx_mock.add_response(url=GOOD_URL, method="POST", status_code=200)
        httpx_mock.add_exception(httpx.ConnectError("refused"), url=BAD_URL)
        httpx_mock.add_exception(httpx.ConnectError("refused"), url=BAD_URL)
        httpx_mock.add_response(url="https://other.example.com/hook", method="POST", status_code=202)

        await engine.handle_notifications(
            [event_factory("b1", "r1"), event_factory("b2", "r2")],
            max_failure_count=2
        )

        assert await registry.get("b1", "r1") == {good: {"url": GOOD_URL}}
        assert await registry.get("b2", "r2") == {other: {"url": "https://other.example.com/hook"}}
        assert len(httpx_mock.get_requests(url=BAD_URL)) == 2
        assert bad not in await registry.get("b1", "r1")

    @pytest.mark.asyncio
    async def test_last_failing_subscriber_prunes_bucket(self, engine, registry, httpx_mock, sample_event):
        await registry.create("b1", "r1", BAD_URL)
        httpx_mock.add_response(url=BAD_URL, method="POST", status_code=410)

        await engine.handle_notifications([sample_event], max_failure_count=1)

        with pytest.raises(NotFoundError):
            await registry.get("b1")

    @pytest.mark.asyncio
    async def test_no_subscribers(self, engine, httpx_mock, event_factory):
        """Test events without subscribers are skipped and later events still delivered."""
        httpx_mock.add_response(url=GOOD_URL, method="POST", status_code=200)
        await engine.registry.create("b2", "r2", GOOD_URL)

        await engine.handle_notifications(
            [event_factory("nobody", "r1"), event_factory("b2", "r2")],
            max_failure_count=5
        )

        assert len(httpx_mock.get_requests()) == 1

    @pytest.mark.asyncio
    async def test_events_processed_in_order(self, engine, registry, httpx_mock, event_factory):
        await registry.create("b1", "r1", GOOD_URL)
        httpx_mock.add_response(url=GOOD_URL, method="POST", status_code=200)
        httpx_mock.add_response(url=GOOD_URL, method="POST", status_code=200)

        await engine.handle_notifications(
            [event_factory(objectName="first"), event_factory(objectName="second")],
            max_failure_count=5
        )

        names = [
            json.loads(request.content)["event"][0]["objectName"]
            for request in httpx_mock.get_requests(url=GOOD_URL)
        ]
        assert names == ["first", "second"]

    @pytest.mark.asyncio
    async def test_lookup_error_abandons_batch(self, event_factory):
        """Test a non-not-found lookup failure stops the remaining events."""
        registry = MagicMock()
        registry.get = AsyncMock(side_effect=RuntimeError("store unavailable"))
        delivery_client = MagicMock()
        delivery_client.deliver_event = AsyncMock()
        engine = DeliveryEngine(registry=registry, delivery_client=delivery_client)

        await engine.handle_notifications(
            [event_factory("b1", "r1"), event_factory("b2", "r2")],
            max_failure_count=5
        )

        registry.get.assert_awaited_once_with("b1", "r1")
        delivery_client.deliver_event.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_failure_is_ignored(self, sample_event, recording_sleep):
        """Test a subscription already removed elsewhere does not break the batch."""
        registry = MagicMock()
        registry.get = AsyncMock(return_value={"id-1": {"url": BAD_URL}})
        registry.delete = AsyncMock(side_effect=NotFoundError("ID id-1 not found for b1/r1"))
        delivery_client = MagicMock()
        delivery_client.deliver_event = AsyncMock(side_effect=DeliveryError(BAD_URL, "boom"))
        engine = DeliveryEngine(registry=registry, delivery_client=delivery_client, sleep=recording_sleep)

        await engine.handle_notifications([sample_event, sample_event], max_failure_count=2)

        assert registry.delete.await_count == 2
        registry.delete.assert_awaited_with("b1", "r1", "id-1")

    @pytest.mark.asyncio
    async def test_metrics_published(self, registry, httpx_mock, sample_event, recording_sleep):
        metrics_client = MagicMock()
        engine = DeliveryEngine(
            registry=registry,
            delivery_client=WebhookDeliveryClient(timeout_seconds=1),
            metrics_client=metrics_client,
            sleep=recording_sleep
        )
        await registry.create("b1", "r1", GOOD_URL)
        await registry.create("b1", "r1", BAD_URL)
        httpx_mock.add_response(url=GOOD_URL, method="POST", status_code=200)
        httpx_mock.add_response(url=BAD_URL, method="POST", status_code=500)

        await engine.handle_notifications([sample_event], max_failure_count=1)

        published = sorted(call.kwargs["metric_name"] for call in metrics_client.put_metric.call_args_list)
        assert published == ["DeliveryFailed", "DeliverySucceeded", "SubscriptionRemoved"]
