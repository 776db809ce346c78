"""Pydantic schemas for authentication audit events."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthEventType(str, Enum):
    """Well-known authentication event types.

    ``AuthEvent.type`` also accepts any other string.
    """

    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    REGISTRATION = "registration"
    LOGOUT = "logout"
    PASSWORD_RESET = "password_reset"
    RATE_LIMITED = "rate_limited"
    ACCOUNT_APPROVED = "account_approved"


class AuthEvent(BaseModel):
    """Authentication event submitted by request-handling code."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str = Field(..., description="Event type, e.g. 'login_failed'.")
    email: str | None = Field(default=None, description="Email the event refers to.")
    user_id: str | None = Field(
        default=None, alias="userId", description="Identifier of the affected user."
    )
    ip_address: str | None = Field(
        default=None, alias="ipAddress", description="Client IP address."
    )
    details: Any = Field(default=None, description="Free-form event context.")

    def to_log_record(self, timestamp: str) -> dict[str, Any]:
        """Shape the event for the log sink (``ip_address`` becomes ``ip``)."""
        event_type = self.type.value if isinstance(self.type, Enum) else self.type
        return {
            "type": event_type,
            "email": self.email,
            "user_id": self.user_id,
            "ip": self.ip_address,
            "details": self.details,
            "timestamp": timestamp,
        }
