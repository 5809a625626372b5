"""
Module: signature.py
Description: Shared-secret request signature verification.

Every request to the relay, notifications and subscription management
alike, carries an x-bz-event-notification-signature header of the form
"v1=<hex HMAC-SHA256 of the raw body>", keyed with the signing secret.

Key Components:
- compute_signature(): HMAC-SHA256 hex digest of a body
- verify_signature(): Check a header value against a body
- require_signed_request(): FastAPI dependency enforcing the check

Dependencies: hmac, hashlib, fastapi
"""

import hashlib
import hmac
from typing import Optional

from fastapi import HTTPException, Request
from fastapi import status as status_codes

from webhook_relay.config.settings import settings
from webhook_relay.utils.logger import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADER = 'x-bz-event-notification-signature'
SIGNATURE_VERSION = 'v1'


def compute_signature(body: bytes, signing_secret: str) -> str:
    """Return the hex HMAC-SHA256 of body keyed with signing_secret."""
    return hmac.new(signing_secret.encode('utf-8'), body, hashlib.sha256).hexdigest()


def verify_signature(signature: Optional[str], body: bytes, signing_secret: str) -> bool:
    """
    Verify a signature header value against a request body.

    Args:
        signature: Header value, expected as "v1=<hex digest>"
        body: Raw request body
        signing_secret: Shared secret

    Returns:
        True if the signature is well-formed and matches, False otherwise

    Example:
        >>> header = f"v1={compute_signature(b'{}', 'secret')}"
        >>> verify_signature(header, b'{}', 'secret')
        True
    """
    if not signature:
        logger.warning("Missing signature header")
        return False

    pair = signature.split('=')
    if len(pair) != 2:
        logger.warning("Invalid signature format", signature=signature)
        return False

    version, received = pair
    if version != SIGNATURE_VERSION:
        logger.warning("Invalid signature version", version=version)
        return False

    calculated = compute_signature(body, signing_secret)
    if not hmac.compare_digest(received, calculated):
        logger.warning("Invalid signature")
        return False

    logger.debug("Signature is valid")
    return True


async def require_signed_request(request: Request) -> None:
    """
    Dependency rejecting requests without a valid signature.

    Raises:
        HTTPException: 500 if no signing secret is configured,
            401 if the signature is missing or does not match
    """
    if not settings.signing_secret:
        logger.error("SIGNING_SECRET is not configured")
        raise HTTPException(
            status_code=status_codes.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Signing secret is not configured"
        )

    body = await request.body()
    if not verify_signature(request.headers.get(SIGNATURE_HEADER), body, settings.signing_secret):
        raise HTTPException(
            status_code=status_codes.HTTP_401_UNAUTHORIZED,
            detail="Invalid signature"
        )
