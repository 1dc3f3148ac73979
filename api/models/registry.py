"""Pydantic models for the registry API."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapping every registry API response."""

    success: bool = True
    data: T | None = None
    error: str | None = None

    @classmethod
    def failure(cls, message: str) -> "ApiResponse[None]":
        return ApiResponse[None](success=False, error=message)


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str
    version: str
    environment: str
