"""API client for the MelView cloud endpoints.

This module provides HTTP communication with the MelView API: login,
discovery, capability and status queries, and command dispatch with an
opportunistic local (LAN) delivery.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from aiohttp import ClientError, ClientSession, ClientTimeout, DummyCookieJar, hdrs

from pymelview.auth import AuthenticationHandler
from pymelview.const import (
    APP_VERSION,
    AUTH_COOKIE_NAME,
    CAPABILITIES_SERVICE,
    COMMAND_PROTOCOL_VERSION,
    COMMAND_SEPARATOR,
    COMMAND_SERVICE,
    CONTENT_TYPE_JSON,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    REQUEST_LOCAL_COMMAND,
    ROOMS_SERVICE,
    USER_AGENT,
)
from pymelview.exceptions import MelviewConnectionError, MelviewProtocolError, MelviewTimeoutError
from pymelview.local import LocalCommandDispatcher
from pymelview.parsers import parse_command_response


if TYPE_CHECKING:
    from types import TracebackType

    from pymelview.commands import Command
    from pymelview.models import Account, Building, Capabilities, CommandResponse, State

_LOGGER = logging.getLogger(__name__)


class MelviewAPI:
    """Client for the MelView cloud API.

    Every authenticated call first checks whether the session credential is
    stale. If it is, a login is started in the background and the call goes
    ahead with whatever credential is held at that moment. A call made with
    an expired credential may therefore fail once; the next call uses the
    renewed session.

    Example:
        ```python
        from pymelview import MelviewAPI, UnitCommand

        async with MelviewAPI(username="user@example.com", password="password") as api:
            await api.login()
            buildings = await api.discover()

            unit_id = buildings[0]["units"][0]["unitid"]
            state = await api.get_status(unit_id)

            # Power on and set 22 degrees in one request
            await api.command(
                UnitCommand(unit_id, "PW1", local_address="192.168.1.20"),
                UnitCommand(unit_id, "TS22"),
            )
        ```

    Attributes:
        base_url: Base URL for the API (default: https://api.melview.net/api).
    """

    def __init__(
        self,
        username: str,
        password: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: ClientSession | None = None,
        auth_handler: AuthenticationHandler | None = None,
        app_version: str = APP_VERSION,
    ) -> None:
        """Initialize the API client.

        Args:
            username: Account email address.
            password: Account password.
            base_url: Base URL for the API. Defaults to MelView production API.
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
            auth_handler: Optional pre-configured AuthenticationHandler. If not
                provided, one will be created with the given credentials.
            app_version: Application version reported at login.
        """
        if auth_handler is not None:
            self._auth_handler = auth_handler
        else:
            self._auth_handler = AuthenticationHandler(
                username=username,
                password=password,
                base_url=base_url,
                session=session,
                app_version=app_version,
            )

        self.base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self._local_dispatcher = LocalCommandDispatcher(session=session)
        self._renewal_task: asyncio.Task[None] | None = None

    @property
    def auth_handler(self) -> AuthenticationHandler:
        """Get the session manager used by this client."""
        return self._auth_handler

    @property
    def local_dispatcher(self) -> LocalCommandDispatcher:
        """Get the dispatcher used for LAN delivery of commands."""
        return self._local_dispatcher

    async def __aenter__(self) -> MelviewAPI:
        """Enter the context manager.

        Creates session if needed and shares it with the auth handler.

        Returns:
            Self for use in async with statements.
        """
        if self._session is None:
            # Cookies are sent per request from the held credential
            self._session = ClientSession(cookie_jar=DummyCookieJar())
            self._owns_session = True

        self._auth_handler.set_session(self._session)
        self._local_dispatcher.set_session(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager.

        Cancels background work and closes the session if it was created by
        this client.
        """
        await self.close()

    async def close(self) -> None:
        """Cancel background work and release the owned session."""
        if self._renewal_task is not None:
            self._renewal_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._renewal_task
            self._renewal_task = None

        await self._local_dispatcher.shutdown()

        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    async def login(self) -> Account:
        """Log in to the MelView API.

        Returns:
            The account description returned by the server.

        Raises:
            MelviewConnectionError: If the request fails or the status is not 200.
            MelviewProtocolError: If the session cookie or the body is malformed.
            AuthenticationError: If no credential could be obtained.
        """
        return await self._auth_handler.login()

    def _renew_if_stale(self) -> None:
        """Start a background login when the credential is stale.

        The caller does not wait for the login. At most one renewal is
        pending at a time.
        """
        if not self._auth_handler.is_expiring_or_absent():
            return

        if self._renewal_task is not None and not self._renewal_task.done():
            _LOGGER.debug("Session renewal already in progress")
            return

        _LOGGER.debug("Session credential is stale, renewing in background")
        self._renewal_task = asyncio.create_task(self._renew())

    async def _renew(self) -> None:
        """Log in again, logging instead of raising on failure."""
        try:
            await self._auth_handler.login()
        except Exception:
            _LOGGER.exception("Background session renewal failed")

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    def _populate_headers(self) -> dict[str, str]:
        """Build the headers for an authenticated request."""
        return {
            hdrs.USER_AGENT: USER_AGENT,
            hdrs.CONTENT_TYPE: CONTENT_TYPE_JSON,
        }

    def _populate_cookies(self) -> dict[str, str]:
        """Build the session cookie from the held credential.

        Request-level cookies take precedence over anything the session's
        cookie jar picked up, including cookies from rejected logins.
        """
        return {AUTH_COOKIE_NAME: self._auth_handler.current_credential_value()}

    async def request(self, service: str, json_data: dict[str, Any] | None = None) -> Any:
        """Make an authenticated API request.

        This is the core method for all authenticated HTTP communication. It
        handles background session renewal, authentication headers and
        response parsing.

        Args:
            service: Endpoint name (e.g., "rooms.aspx").
            json_data: Optional JSON data for request body.

        Returns:
            The decoded JSON body.

        Raises:
            RuntimeError: If session is not initialized or is closed.
            AuthenticationError: If no credential has ever been obtained.
            MelviewConnectionError: If the request fails or the status is not 200.
            MelviewTimeoutError: If the request times out.
            MelviewProtocolError: If the body is not valid JSON.
        """
        if self._session is None:
            msg = "Session not initialized. Use 'async with' or provide a session."
            raise RuntimeError(msg)

        if self._session.closed:
            msg = "Session is closed. Cannot make request."
            raise RuntimeError(msg)

        self._renew_if_stale()

        url = f"{self.base_url}/{service}"
        headers = self._populate_headers()
        cookies = self._populate_cookies()
        timeout = ClientTimeout(total=DEFAULT_TIMEOUT)

        try:
            async with self._session.post(
                url, json=json_data, headers=headers, cookies=cookies, timeout=timeout
            ) as response:
                if response.status != HTTPStatus.OK:
                    msg = f"Request to {service} failed with status {response.status}"
                    raise MelviewConnectionError(msg)

                try:
                    return await response.json(content_type=None)
                except ValueError as exc:
                    msg = f"Invalid JSON response from {service}: {exc}"
                    raise MelviewProtocolError(msg) from exc

        except TimeoutError as exc:
            _LOGGER.debug("Request to %s timed out", url)
            msg = f"Request to {service} timed out"
            raise MelviewTimeoutError(msg) from exc

        except ClientError as exc:
            _LOGGER.debug("Connection error for %s: %s", url, exc)
            msg = f"Failed to connect to MelView: {exc}"
            raise MelviewConnectionError(msg) from exc

    # -------------------------------------------------------------------------
    # Unit Endpoints
    # -------------------------------------------------------------------------

    async def discover(self) -> list[Building] | None:
        """Query the inventory of buildings and units on the account.

        Discovery is meaningless before the first login and does not trigger
        it.

        Returns:
            List of buildings, or None if the client has never logged in.
        """
        if not self._auth_handler.is_authenticated():
            _LOGGER.debug("Skipping discovery - not logged in")
            return None

        buildings: list[Building] = await self.request(ROOMS_SERVICE)
        return buildings

    async def capabilities(self, unit_id: str) -> Capabilities:
        """Query the capabilities of a unit.

        Args:
            unit_id: Unit identifier.

        Returns:
            Capabilities descriptor as returned by the server.
        """
        capabilities: Capabilities = await self.request(CAPABILITIES_SERVICE, {"unitid": unit_id})
        return capabilities

    async def get_status(self, unit_id: str) -> State:
        """Get the current state of a unit.

        Args:
            unit_id: Unit identifier.

        Returns:
            Live state snapshot as returned by the server.
        """
        state: State = await self.request(COMMAND_SERVICE, {"unitid": unit_id})
        return state

    async def command(self, command: Command, *command_chain: Command) -> CommandResponse:
        """Issue one or more chained commands to a unit.

        All commands are sent in a single request and applied together by
        the server. When the server accepts them and returns a local-command
        token, the primary command is also delivered straight to the unit
        over the LAN. That delivery runs in the background and never affects
        the result.

        Args:
            command: Primary command; its unit is the request target.
            command_chain: Additional commands to execute in the same request.

        Returns:
            CommandResponse with the server's result code.
        """
        all_commands = COMMAND_SEPARATOR.join(c.execute() for c in (command, *command_chain))

        payload = {
            "unitid": command.get_unit_id(),
            "v": COMMAND_PROTOCOL_VERSION,
            "commands": all_commands,
            "lc": REQUEST_LOCAL_COMMAND,
        }
        _LOGGER.debug("cmd: %s", payload)

        response = parse_command_response(await self.request(COMMAND_SERVICE, payload))

        if response.has_local_command:
            assert response.local_command is not None
            self._local_dispatcher.dispatch(command, response.local_command)
        elif not response.is_ok:
            _LOGGER.debug("Command %s for unit %s returned %s", all_commands, payload["unitid"], response.error)

        return response
