"""
Module: delivery/retry.py
Description: Retry logic for webhook delivery.

Attempt 1 fires immediately. After each failure the policy waits
0 s, 1 s, 2 s, 4 s, ... before the next attempt, and gives up once
the configured number of attempts has failed.
"""

import asyncio
from typing import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
)
from tenacity.wait import wait_base

from webhook_relay.exceptions import DeliveryError
from webhook_relay.models.event import Event
from webhook_relay.utils.logger import get_logger

logger = get_logger(__name__)


class wait_doubling_after_first(wait_base):
    """Wait 0 after the first failure, then initial, 2 * initial, 4 * initial, ..."""

    def __init__(self, initial: float = 1.0) -> None:
        self.initial = initial

    def __call__(self, retry_state: RetryCallState) -> float:
        failures = retry_state.attempt_number
        if failures <= 1:
            return 0.0
        return self.initial * 2 ** (failures - 2)


def _log_before_sleep(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception()
    logger.info(
        "Retrying delivery",
        url=getattr(error, 'url', None),
        attempt=retry_state.attempt_number,
        wait_seconds=retry_state.next_action.sleep,
        error=str(error)
    )


def delivery_retrying(max_attempts: int, sleep=asyncio.sleep) -> AsyncRetrying:
    """
    Build the retry controller for one subscriber/event delivery.

    Args:
        max_attempts: Total attempts before the delivery is abandoned
        sleep: Awaitable sleep function, replaceable in tests
    """
    return AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_doubling_after_first(1.0),
        retry=retry_if_exception_type(DeliveryError),
        before_sleep=_log_before_sleep,
        reraise=True,
        sleep=sleep
    )


async def retry_delivery(
    delivery_fn: Callable[[str, Event], Awaitable[int]],
    url: str,
    event: Event,
    max_attempts: int,
    sleep=asyncio.sleep
) -> bool:
    """
    Retry event delivery with exponential backoff.

    Args:
        delivery_fn: Async function making a single attempt
        url: Subscriber URL
        event: Event to deliver
        max_attempts: Total attempts before giving up
        sleep: Awaitable sleep function, replaceable in tests

    Returns:
        True if an attempt succeeded, False once every attempt has failed
    """
    try:
        async for attempt in delivery_retrying(max_attempts, sleep=sleep):
            with attempt:
                await delivery_fn(url, event)
    except DeliveryError as e:
        logger.error(
            "Delivery failed after all retries",
            url=url,
            attempts=max_attempts,
            error=str(e)
        )
        return False

    return True
