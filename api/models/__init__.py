"""API models package."""

from api.models.registry import ApiResponse, HealthResponse

__all__ = [
    "ApiResponse",
    "HealthResponse",
]
