"""
Module: auth
Description: Package initialization for request authentication.

This package contains the shared-secret signature check applied to
every request reaching the relay.
"""

from .signature import compute_signature, require_signed_request, verify_signature

__all__ = [
    "compute_signature",
    "require_signed_request",
    "verify_signature",
]
