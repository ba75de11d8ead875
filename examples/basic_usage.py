"""Basic usage example for pymelview library."""

import asyncio
import logging

from pymelview import MelviewAPI


async def main() -> None:
    """Log in, list every unit and print its current state."""
    logging.basicConfig(level=logging.INFO)

    async with MelviewAPI(
        username="your@email.com",
        password="your_password",
    ) as api:
        account = await api.login()
        print(f"Logged in as {account.get('fullname', 'unknown')}")

        buildings = await api.discover() or []
        print(f"Found {len(buildings)} building(s)")

        for building in buildings:
            print(f"\nBuilding: {building.get('building')}")
            for unit in building.get("units", []):
                unit_id = unit["unitid"]
                state = await api.get_status(unit_id)
                capabilities = await api.capabilities(unit_id)

                print(f"  Unit {unit_id} ({unit.get('room')})")
                print(f"    Power: {state.get('power')}")
                print(f"    Set temperature: {state.get('settemp')}")
                print(f"    Room temperature: {state.get('roomtemp')}")
                print(f"    Local address: {capabilities.get('localip', 'n/a')}")


if __name__ == "__main__":
    asyncio.run(main())
