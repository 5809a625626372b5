"""
Module: utils
Description: Package initialization for utility functions.

Current utilities:
- logger: Structured logging configuration and helpers
- metrics: CloudWatch delivery metrics
"""

__all__ = []
