"""Health check models for service monitoring."""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: Literal["healthy", "degraded"]
    rule_count: int
    timestamp: str
