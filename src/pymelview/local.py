"""Best-effort delivery of commands straight to a unit on the LAN.

After the cloud accepts a command it may hand back a local-command token.
Posting that token to the unit's own HTTP endpoint makes it act without
waiting for the cloud to relay the change. The cloud acknowledgement is
authoritative, so failures here are logged and never reported.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from aiohttp import ClientError, ClientSession, ClientTimeout

from pymelview.const import LOCAL_COMMAND_TIMEOUT


if TYPE_CHECKING:
    from pymelview.commands import Command

_LOGGER = logging.getLogger(__name__)


class LocalCommandDispatcher:
    """Fire-and-forget sender for local-command payloads.

    Each dispatch runs as a detached task. Tasks are tracked until they
    finish so they are not garbage collected mid-flight and can be
    cancelled on shutdown.

    Example:
        ```python
        dispatcher = LocalCommandDispatcher(session=session)
        dispatcher.dispatch(UnitCommand("123", "PW1", "192.168.1.20"), token)
        ...
        await dispatcher.shutdown()
        ```
    """

    def __init__(
        self,
        *,
        session: ClientSession | None = None,
        timeout: float = LOCAL_COMMAND_TIMEOUT,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            session: aiohttp ClientSession used for the LAN requests. May be set
                later with set_session().
            timeout: Total seconds allowed for one local request.
        """
        self._session = session
        self._timeout = timeout
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Get number of local requests still in flight."""
        return len(self._tasks)

    def set_session(self, session: ClientSession) -> None:
        """Set the aiohttp session used for local requests."""
        self._session = session

    def dispatch(self, command: Command, token: str) -> asyncio.Task[None]:
        """Send the command to the unit in the background.

        Args:
            command: Command that was accepted by the cloud.
            token: Local-command token from the cloud response.

        Returns:
            The detached task. Callers are not expected to await it.
        """
        task = asyncio.create_task(self._send(command, token))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _send(self, command: Command, token: str) -> None:
        """Post the local payload, logging the outcome."""
        unit_id = None
        try:
            unit_id = command.get_unit_id()

            if self._session is None or self._session.closed:
                msg = "Session not available for local command"
                raise RuntimeError(msg)

            url = command.get_local_command_url()
            body = command.get_local_command_body(token)
            timeout = ClientTimeout(total=self._timeout)

            async with self._session.post(url, data=body, timeout=timeout) as response:
                text = await response.text()
                if not response.ok:
                    _LOGGER.warning(
                        "Unit %s rejected local command with status %d",
                        unit_id,
                        response.status,
                    )
                    return

            _LOGGER.debug("Successfully processed local request: %s", text)

        except TimeoutError:
            _LOGGER.warning("Local command to unit %s timed out", unit_id)

        except ClientError as exc:
            _LOGGER.warning("Unable to access unit via direct LAN interface: %s", exc)

        except Exception:
            _LOGGER.warning("Local command failed", exc_info=True)

    async def shutdown(self) -> None:
        """Cancel local requests that are still in flight."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()

        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if tasks:
            _LOGGER.debug("Cancelled %d local command(s)", len(tasks))
