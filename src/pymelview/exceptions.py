"""Custom exceptions for pymelview library."""

from __future__ import annotations


class MelviewError(Exception):
    """Base exception for all MelView errors."""


class AuthenticationError(MelviewError):
    """Exception raised when no session credential could be obtained."""


class MelviewConnectionError(MelviewError):
    """Exception raised for transport failures or non-success HTTP status."""


class MelviewTimeoutError(MelviewConnectionError):
    """Exception raised when API requests timeout."""


class MelviewProtocolError(MelviewError):
    """Exception raised when a response cannot be interpreted.

    Covers response bodies that are not the expected JSON and login
    responses whose session cookie is missing or malformed.
    """


# Names used by the wire-protocol documentation
AuthError = AuthenticationError
NetworkError = MelviewConnectionError
ProtocolError = MelviewProtocolError
