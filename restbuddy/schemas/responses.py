"""
RestBuddy: Response Schemas
=============================

What:  Pydantic models for the fixed-shape bodies the service returns.
Why:   Record bodies are shaped by each dispatcher's formatter and have no
       fixed schema; only errors and health checks do.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """
    What:  Body of the local 404 for a show request on a missing record.

    Example:
        {"message": "User not found"}
    """
    message: str = Field(description="Human-readable message")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error envelope produced by the global exception handlers.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description
        details: Optional extra context (e.g., which field failed to convert)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "validation_error",
            "message": "Invalid value for 'id': 'abc'",
            "details": {"field": "id", "expected": "int"},
            "request_id": "1f0c9a2e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    resources: List[str] = Field(description="Registered resource names")
    uptime_seconds: float = Field(description="Seconds since service started")
