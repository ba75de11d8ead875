"""Command abstraction for MelView units.

A command knows how to serialize itself into a fragment of the cloud
``commands`` field, which unit it targets, and how to render the payload
for direct delivery to the unit over the LAN.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from pymelview.const import LOCAL_COMMAND_PATH


__all__ = [
    "Command",
    "UnitCommand",
]

LOCAL_COMMAND_TEMPLATE = '<?xml version="1.0" encoding="UTF-8"?>\n<ESV>{token}</ESV>'


@runtime_checkable
class Command(Protocol):
    """Interface every command passed to MelviewAPI.command() must satisfy."""

    def execute(self) -> str:
        """Serialize the command into a fragment such as ``PW1``."""
        ...

    def get_unit_id(self) -> str:
        """Return the identifier of the unit the command targets."""
        ...

    def get_local_command_body(self, token: str) -> str:
        """Render the LAN payload for the token returned by the cloud."""
        ...

    def get_local_command_url(self) -> str:
        """Return the URL of the unit's local command endpoint."""
        ...


@dataclass(frozen=True)
class UnitCommand:
    """Raw command code addressed to one unit.

    The code is passed to the server verbatim (e.g. ``PW1`` to power on,
    ``TS22`` to set 22 degrees); no capability checking is done here.

    Attributes:
        unit_id: Target unit identifier.
        code: Command code understood by the MelView API.
        local_address: Host or IP of the unit on the LAN, if known.
    """

    unit_id: str
    code: str
    local_address: str | None = None

    def execute(self) -> str:
        """Serialize the command into its wire fragment."""
        return self.code

    def get_unit_id(self) -> str:
        """Return the target unit identifier."""
        return self.unit_id

    def get_local_command_body(self, token: str) -> str:
        """Wrap the cloud-issued token in the unit's XML envelope."""
        return LOCAL_COMMAND_TEMPLATE.format(token=token)

    def get_local_command_url(self) -> str:
        """Return the local command endpoint of the unit.

        Raises:
            ValueError: If the unit's local address is unknown.
        """
        if not self.local_address:
            msg = f"No local address known for unit {self.unit_id}"
            raise ValueError(msg)
        return f"http://{self.local_address}{LOCAL_COMMAND_PATH}"
