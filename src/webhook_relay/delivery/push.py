"""
Module: push.py
Description: Single-attempt webhook delivery to a subscriber.

POSTs one event, wrapped as {"event": [event]}, to a subscriber URL.
Any outcome other than a 2xx response is reported as a DeliveryError
so the retry policy can decide whether to try again.
"""

import httpx

from webhook_relay.exceptions import DeliveryError
from webhook_relay.models.event import Event
from webhook_relay.utils.logger import get_logger


class WebhookDeliveryClient:
    """
    HTTP client for forwarding events to subscribers.

    Each attempt opens its own httpx.AsyncClient with the configured
    timeout, so attempts to different subscribers share no state.
    """

    def __init__(self, timeout_seconds: int = 10, logger=None):
        """
        Initialize webhook delivery client.

        Args:
            timeout_seconds: HTTP timeout in seconds for each attempt
            logger: Structured logger, defaults to the module logger
        """
        self.timeout = httpx.Timeout(timeout_seconds, connect=timeout_seconds)
        self.logger = logger or get_logger(__name__)

    async def deliver_event(self, url: str, event: Event) -> int:
        """
        Make one delivery attempt.

        Args:
            url: Subscriber URL
            event: Event to forward

        Returns:
            HTTP status code of the successful response

        Raises:
            DeliveryError: On timeout, network failure or non-2xx response
        """
        body = {'event': [event.to_payload()]}

        self.logger.debug(
            "Attempting event delivery",
            url=url,
            bucket_name=event.bucket_name,
            rule_name=event.matched_rule_name
        )

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(url, json=body)

            except httpx.TimeoutException as e:
                self.logger.warning("Event delivery timeout", url=url)
                raise DeliveryError(url, f"POST to {url} timed out") from e

            except httpx.HTTPError as e:
                self.logger.warning(
                    "Event delivery network error",
                    url=url,
                    error=str(e),
                    error_type=type(e).__name__
                )
                raise DeliveryError(url, f"POST to {url} failed: {e}") from e

        if not response.is_success:
            self.logger.warning(
                "Event delivery HTTP error",
                url=url,
                status_code=response.status_code,
                response=response.text[:500]
            )
            raise DeliveryError(
                url,
                f"POST to {url} failed with status {response.status_code}",
                status_code=response.status_code
            )

        self.logger.info(
            "Event delivered successfully",
            url=url,
            status_code=response.status_code,
            response_time_ms=response.elapsed.total_seconds() * 1000
        )

        return response.status_code
