"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ============================================================
# Reply Schemas
# ============================================================

class GenerateReplyRequest(BaseModel):
    """Schema for a reply suggestion request."""

    message: str | None = Field(default=None, max_length=10000)
    tone: str | None = Field(default=None, max_length=50)
    length: str | None = Field(default=None, max_length=50)
    site: str | None = Field(default=None, max_length=255)


class GenerateReplyResponse(BaseModel):
    """Schema for a generated reply."""

    reply: str


# ============================================================
# Billing Schemas
# ============================================================

class CheckoutRequest(BaseModel):
    """Schema for creating a checkout session."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(default="guest", alias="userId", min_length=1, max_length=255)


class CheckoutResponse(BaseModel):
    """Schema for a created checkout session."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    url: str | None = None


class WebhookAck(BaseModel):
    """Schema for webhook acknowledgement."""

    received: bool = True
    duplicate: bool = False


class AccountStatus(BaseModel):
    """Schema for account subscription status."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    is_pro: bool = Field(..., alias="isPro")


# ============================================================
# Common Response Schemas
# ============================================================

class ErrorResponse(BaseModel):
    """Schema for error responses."""

    error: dict[str, Any] = Field(
        ...,
        json_schema_extra={"example": {"message": "Error description", "details": {}}},
    )


# ============================================================
# Health Check Schemas
# ============================================================

class ServiceHealth(BaseModel):
    """Schema for individual service health."""

    status: str = Field(..., pattern=r"^(healthy|unhealthy|degraded)$")
    latency_ms: float | None = None
    details: dict[str, Any] | None = None


class HealthResponse(BaseModel):
    """Schema for health check response."""

    status: str = Field(..., pattern=r"^(healthy|unhealthy|degraded)$")
    timestamp: datetime
    version: str
    services: dict[str, ServiceHealth]
