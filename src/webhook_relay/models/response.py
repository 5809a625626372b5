"""
Module: response.py
Description: Error response model for the relay API.

Every error returned by the relay has the shape
{"error": {"code": 404, "message": "...", "type": "not_found"}}.
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Body of an error response."""

    code: int = Field(..., description="HTTP status code")
    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")


class ErrorResponse(BaseModel):
    """Envelope for error responses."""

    error: ErrorDetail
