"""
Module: handlers
Description: Package initialization for API endpoint handlers.

This package contains FastAPI route handlers for the webhook relay:
- subscriptions: Subscription management under /@subscriptions
- notifications: Event notification intake
- dependencies: Shared registry and delivery engine dependencies
"""

__all__ = []
