"""
Module: exceptions.py
Description: Error kinds raised by the subscription registry and delivery engine.

The request router maps these onto HTTP status codes:
NotFoundError -> 404, MethodNotAllowedError -> 405, ValidationError -> 400.
DeliveryError never leaves the delivery engine.
"""

from typing import Optional


class RelayError(Exception):
    """Base class for all relay errors."""

    status_code = 400
    error_type = "relay_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(RelayError):
    """Malformed input: bad URL, bad UUID, missing required field."""

    status_code = 400
    error_type = "validation_error"


class NotFoundError(RelayError):
    """A referenced bucket, rule or subscription does not exist."""

    status_code = 404
    error_type = "not_found"


class MethodNotAllowedError(RelayError):
    """The method is not supported on the addressed resource."""

    status_code = 405
    error_type = "method_not_allowed"


class DeliveryError(RelayError):
    """
    A single delivery attempt failed.

    Attributes:
        url: Subscriber URL the attempt was made against
        response_status: HTTP status of the response, None on network failure
    """

    error_type = "delivery_error"

    def __init__(self, url: str, message: str, status_code: Optional[int] = None) -> None:
        self.url = url
        self.response_status = status_code
        super().__init__(message)
