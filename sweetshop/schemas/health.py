"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    status: Literal["ok", "degraded"] = Field(
        default="ok",
        description="'degraded' when the database cannot be reached",
    )
    service: str = Field(default="sweetshop", description="Service name")
    environment: str = Field(description="Current app environment (dev or prod)")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a SELECT 1 against DATABASE_URL",
    )
