"""Data models for MelView API requests and responses."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from email.utils import parsedate_to_datetime
from typing import Any

from pymelview.const import RESPONSE_OK


__all__ = [
    "Account",
    "Building",
    "Capabilities",
    "CommandResponse",
    "Credential",
    "State",
]

# Server-described payloads, passed through without interpretation
Account = dict[str, Any]
Building = dict[str, Any]
Capabilities = dict[str, Any]
State = dict[str, Any]


@dataclass(frozen=True)
class Credential:
    """Session token issued by the login endpoint.

    Expiry metadata is kept exactly as the server sent it in the
    ``Set-Cookie`` header and only interpreted when the remaining lifetime
    is requested.

    Attributes:
        value: Opaque token sent back as the ``auth`` cookie.
        created_at: When the token was received.
        max_age: Raw ``Max-Age`` attribute, if any.
        expires: Raw ``Expires`` attribute, if any.
    """

    value: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    max_age: str | None = None
    expires: str | None = None

    def expiry_time(self) -> datetime | None:
        """Return the absolute expiry, or None for a session cookie.

        ``Max-Age`` takes precedence over ``Expires``.

        Raises:
            ValueError: If the expiry metadata cannot be interpreted.
        """
        if self.max_age:
            return self.created_at + timedelta(seconds=int(self.max_age))

        if self.expires:
            # ASP.NET writes dates as "Tue, 20-Oct-2026 10:00:00 GMT"
            expires_at = parsedate_to_datetime(self.expires.replace("-", " "))
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=UTC)
            return expires_at

        return None

    def remaining_lifetime(self, now: datetime | None = None) -> float:
        """Return the seconds left before expiry (``math.inf`` if none).

        Args:
            now: Reference time. Defaults to the current UTC time.

        Raises:
            ValueError: If the expiry metadata cannot be interpreted.
        """
        expires_at = self.expiry_time()
        if expires_at is None:
            return math.inf

        reference = now if now is not None else datetime.now(UTC)
        return (expires_at - reference).total_seconds()


@dataclass
class CommandResponse:
    """Result of a unit command.

    Attributes:
        error: Result code, ``"ok"`` on success.
        local_command: Token for direct LAN delivery, if the server supplied one.
        raw_data: Original API response data for debugging.
    """

    error: str
    local_command: str | None = None
    raw_data: dict[str, Any] = field(default_factory=dict)

    @property
    def is_ok(self) -> bool:
        """Check if the cloud accepted the command."""
        return self.error == RESPONSE_OK

    @property
    def has_local_command(self) -> bool:
        """Check if the command should also be delivered over the LAN."""
        return self.is_ok and bool(self.local_command)
