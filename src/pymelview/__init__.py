"""Python client library for MelView air conditioning units.

This package provides an async client for the MelView cloud API used by
Mitsubishi Electric Wi-Fi controlled air conditioners.

The library is organized into three layers:
1. **Session** (pymelview.auth): Cookie-based login and expiry tracking
2. **API** (pymelview.api): Discovery, capability and status queries, command dispatch
3. **Local delivery** (pymelview.local): Best-effort LAN delivery of accepted commands

Example:
    Basic usage:

    ```python
    from pymelview import MelviewAPI, UnitCommand

    async with MelviewAPI(username="user@example.com", password="password") as api:
        account = await api.login()
        buildings = await api.discover()

        for building in buildings or []:
            for unit in building.get("units", []):
                state = await api.get_status(unit["unitid"])
                print(unit["room"], state.get("roomtemp"))

        # Chain commands into a single request
        await api.command(UnitCommand("123456", "PW1"), UnitCommand("123456", "TS22"))
    ```
"""

from __future__ import annotations

from pymelview.api import MelviewAPI
from pymelview.auth import AuthenticationHandler
from pymelview.commands import Command, UnitCommand
from pymelview.exceptions import (
    AuthenticationError,
    AuthError,
    MelviewConnectionError,
    MelviewError,
    MelviewProtocolError,
    MelviewTimeoutError,
    NetworkError,
    ProtocolError,
)
from pymelview.local import LocalCommandDispatcher
from pymelview.models import Account, Building, Capabilities, CommandResponse, Credential, State
from pymelview.parsers import parse_command_response, parse_session_cookie


__version__ = "0.1.0"

__all__ = [
    "Account",
    "AuthError",
    "AuthenticationError",
    "AuthenticationHandler",
    "Building",
    "Capabilities",
    "Command",
    "CommandResponse",
    "Credential",
    "LocalCommandDispatcher",
    "MelviewAPI",
    "MelviewConnectionError",
    "MelviewError",
    "MelviewProtocolError",
    "MelviewTimeoutError",
    "NetworkError",
    "ProtocolError",
    "State",
    "UnitCommand",
    "__version__",
    "parse_command_response",
    "parse_session_cookie",
]
