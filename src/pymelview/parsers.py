"""Parsing utilities for MelView API responses.

This module provides shared parsing functions used by both the
authentication handler and the API client to convert raw responses into
data models.
"""

from __future__ import annotations

import logging
from http.cookies import CookieError, SimpleCookie
from typing import TYPE_CHECKING, Any

from pymelview.const import AUTH_COOKIE_NAME
from pymelview.exceptions import MelviewProtocolError
from pymelview.models import CommandResponse, Credential


if TYPE_CHECKING:
    from collections.abc import Iterable


__all__ = [
    "parse_command_response",
    "parse_session_cookie",
]

_LOGGER = logging.getLogger(__name__)


def parse_session_cookie(set_cookie_headers: Iterable[str]) -> Credential | None:
    """Extract the session credential from ``Set-Cookie`` header values.

    The ``auth`` cookie is preferred. If the server named it differently,
    the first cookie in the response is used.

    Args:
        set_cookie_headers: Every ``Set-Cookie`` value of the login response.

    Returns:
        Credential built from the cookie, or None if the server issued the
        cookie with an empty value (login rejected).

    Raises:
        MelviewProtocolError: If the header is absent or cannot be parsed.
    """
    headers = [header for header in set_cookie_headers if header]
    if not headers:
        msg = "Login response did not set a session cookie"
        raise MelviewProtocolError(msg)

    cookies: SimpleCookie = SimpleCookie()
    try:
        for header in headers:
            cookies.load(header)
    except CookieError as exc:
        msg = f"Malformed session cookie: {exc}"
        raise MelviewProtocolError(msg) from exc

    if not cookies:
        msg = "Malformed session cookie: no cookie could be parsed"
        raise MelviewProtocolError(msg)

    morsel = cookies.get(AUTH_COOKIE_NAME)
    if morsel is None:
        morsel = next(iter(cookies.values()))
        _LOGGER.debug("No '%s' cookie in login response, using '%s'", AUTH_COOKIE_NAME, morsel.key)

    if not morsel.value:
        return None

    return Credential(
        value=morsel.value,
        max_age=morsel["max-age"] or None,
        expires=morsel["expires"] or None,
    )


def parse_command_response(data: Any) -> CommandResponse:
    """Parse the result of a unit command.

    Args:
        data: Decoded JSON body in format {"error": "ok", "lc": "<token>"}.

    Returns:
        CommandResponse instance.

    Raises:
        MelviewProtocolError: If the body is not a JSON object.
    """
    if not isinstance(data, dict):
        msg = f"Unexpected command response: {data!r}"
        raise MelviewProtocolError(msg)

    local_command = data.get("lc")
    return CommandResponse(
        error=str(data.get("error", "")),
        local_command=local_command if isinstance(local_command, str) else None,
        raw_data=data,
    )
