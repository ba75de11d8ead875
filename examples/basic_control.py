"""Basic unit control example for pymelview library."""

import asyncio

from pymelview import MelviewAPI, UnitCommand


UNIT_ID = "123456"


async def main() -> None:
    """Power a unit on, set cooling mode and 22 degrees in one request."""
    async with MelviewAPI(
        username="your@email.com",
        password="your_password",
    ) as api:
        await api.login()

        # The unit's LAN address enables direct delivery when the cloud allows it
        capabilities = await api.capabilities(UNIT_ID)
        local_address = capabilities.get("localip")

        response = await api.command(
            UnitCommand(UNIT_ID, "PW1", local_address=local_address),
            UnitCommand(UNIT_ID, "MD3"),
            UnitCommand(UNIT_ID, "TS22"),
        )
        print(f"Cloud result: {response.error}")
        if response.has_local_command:
            print("Command also sent directly to the unit")

        # Give the LAN delivery a moment before the client shuts down
        await asyncio.sleep(1)

        state = await api.get_status(UNIT_ID)
        print(f"Power: {state.get('power')}, set temperature: {state.get('settemp')}")


if __name__ == "__main__":
    asyncio.run(main())
