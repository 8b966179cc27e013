"""Pydantic schemas for health API."""

from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Service health."""

    status: str
    timestamp: datetime
    database: str
