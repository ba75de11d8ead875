"""Authentication handler for MelView API."""

from __future__ import annotations

import json
import logging
from http import HTTPStatus
from typing import TYPE_CHECKING

from aiohttp import ClientError, ClientSession, ClientTimeout, DummyCookieJar, hdrs

from pymelview.const import (
    APP_VERSION,
    AUTH_SERVICE,
    CONTENT_TYPE_FORM,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    USER_AGENT,
)
from pymelview.exceptions import (
    AuthenticationError,
    MelviewConnectionError,
    MelviewProtocolError,
    MelviewTimeoutError,
)
from pymelview.parsers import parse_session_cookie


if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from pymelview.models import Account, Credential

_LOGGER = logging.getLogger(__name__)


class AuthenticationHandler:
    """Handle authentication with the MelView cloud API.

    This class owns the session credential (the ``auth`` cookie issued by
    the login endpoint), performs login, and answers whether the held
    credential is still usable.

    The credential slot is only ever replaced wholesale by a successful
    login. Staleness is computed from the cookie's own expiry metadata;
    nothing explicitly invalidates a credential.

    Session Update Callback:
        When login succeeds, the on_session_updated callback is invoked with
        the handler instance:

        Example:
            def handle_session_update(handler: AuthenticationHandler) -> None:
                _LOGGER.debug("New session expires %s", handler.credential.expiry_time())

            handler = AuthenticationHandler(
                username="user@example.com",
                password="password",
                on_session_updated=handle_session_update,
            )

    Attributes:
        username: Account email address.
        password: Account password.
        base_url: Base URL for the API (without trailing slash).
        app_version: Application version reported at login.
    """

    def __init__(
        self,
        username: str,
        password: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: ClientSession | None = None,
        app_version: str = APP_VERSION,
        on_session_updated: Callable[[AuthenticationHandler], None] | None = None,
    ) -> None:
        """Initialize the authentication handler.

        Args:
            username: Account email address.
            password: Account password.
            base_url: Base URL for the API. Defaults to MelView production API.
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
            app_version: Application version sent with the login request.
            on_session_updated: Optional callback invoked when login succeeds.
        """
        self.username = username
        self.password = password
        self.base_url = base_url.rstrip("/")
        self.app_version = app_version

        self._credential: Credential | None = None
        self._session = session
        self._owns_session = session is None
        self._on_session_updated = on_session_updated

    @property
    def credential(self) -> Credential | None:
        """Get the currently held credential, if any."""
        return self._credential

    def set_session(self, session: ClientSession) -> None:
        """Set the aiohttp session for this handler.

        The handler will not take ownership and will not close this session.

        Args:
            session: The aiohttp ClientSession to use for requests.
        """
        self._session = session
        self._owns_session = False

    async def __aenter__(self) -> AuthenticationHandler:
        """Enter the context manager.

        Creates a new aiohttp session if one wasn't provided during initialization.

        Returns:
            Self for use in async with statements.
        """
        if self._session is None:
            self._session = ClientSession(cookie_jar=DummyCookieJar())
            self._owns_session = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager.

        Closes the session if it was created by this handler.
        """
        if self._owns_session and self._session is not None:
            await self._session.close()

    def is_authenticated(self) -> bool:
        """Check if a credential is held, fresh or not."""
        return self._credential is not None

    def _validate_session(self) -> ClientSession:
        """Validate that the session is initialized and open.

        Raises:
            RuntimeError: If session is not initialized or is closed.
        """
        if self._session is None:
            msg = "Session not initialized. Use 'async with' or provide a session."
            raise RuntimeError(msg)

        if self._session.closed:
            msg = "Session is closed. Cannot make requests."
            raise RuntimeError(msg)

        return self._session

    async def login(self) -> Account:
        """Log in to the MelView API with username and password.

        This method performs the following:
        1. POSTs the credentials to login.aspx
        2. Extracts the session credential from the Set-Cookie header
        3. Parses the account description from the response body
        4. Replaces the held credential

        A failure at any step leaves the previously held credential untouched.
        So does an empty token, as long as a credential is already held.

        Returns:
            The account description returned by the server.

        Raises:
            MelviewConnectionError: If the request fails or the status is not 200.
            MelviewTimeoutError: If the request times out.
            MelviewProtocolError: If the session cookie or the body is malformed.
            AuthenticationError: If no credential is held after the attempt.
        """
        session = self._validate_session()

        url = f"{self.base_url}/{AUTH_SERVICE}"
        # The endpoint expects a JSON document despite the form content type
        data = json.dumps(
            {
                "user": self.username,
                "pass": self.password,
                "appversion": self.app_version,
            }
        )
        headers = {
            hdrs.USER_AGENT: USER_AGENT,
            hdrs.CONTENT_TYPE: CONTENT_TYPE_FORM,
        }
        timeout = ClientTimeout(total=DEFAULT_TIMEOUT)

        _LOGGER.debug("Logging in to %s", url)

        try:
            async with session.post(url, data=data, headers=headers, timeout=timeout) as response:
                if response.status != HTTPStatus.OK:
                    msg = f"Failed to login with status {response.status} - check the network"
                    raise MelviewConnectionError(msg)

                credential = parse_session_cookie(response.headers.getall(hdrs.SET_COOKIE, []))
                if credential is None and self._credential is None:
                    msg = "Unable to get auth token from MelView - will retry"
                    raise AuthenticationError(msg)

                try:
                    account: Account = await response.json(content_type=None)
                except ValueError as exc:
                    msg = f"Invalid JSON response from MelView: {exc}"
                    raise MelviewProtocolError(msg) from exc

        except TimeoutError as exc:
            msg = "Login request timed out"
            raise MelviewTimeoutError(msg) from exc

        except ClientError as exc:
            msg = f"Failed to connect to MelView: {exc}"
            raise MelviewConnectionError(msg) from exc

        if credential is None:
            _LOGGER.warning("Login returned an empty auth token, keeping the current session")
            return account

        self._credential = credential
        _LOGGER.info("Login successful for %s", self.username)

        if self._on_session_updated is not None:
            self._on_session_updated(self)

        return account

    def is_expiring_or_absent(self) -> bool:
        """Check if the credential is missing or has run out.

        Any failure while computing the remaining lifetime is logged and
        treated as expiring.

        Returns:
            True if a new login is needed, False otherwise.
        """
        credential = self._credential
        if credential is None:
            return True

        try:
            return credential.remaining_lifetime() <= 0
        except Exception:
            _LOGGER.exception("Unable to determine session expiry")
            return True

    def current_credential_value(self) -> str:
        """Get the token for the ``auth`` request cookie.

        Raises:
            AuthenticationError: If no credential is held.
        """
        if self._credential is None:
            msg = "Not logged in to MelView"
            raise AuthenticationError(msg)
        return self._credential.value

    def clear_authentication(self) -> None:
        """Drop the held credential.

        The next authenticated call will schedule a fresh login.
        """
        self._credential = None
        _LOGGER.debug("Authentication state cleared")
