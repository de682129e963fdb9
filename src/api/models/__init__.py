"""API Pydantic models."""

from .requests import AllocationCheckRequest
from .responses import AllocationCheckResponse, ErrorCodes, ErrorResponse, HealthResponse

__all__ = [
    "AllocationCheckRequest",
    "AllocationCheckResponse",
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
]
