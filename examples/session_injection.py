"""Example showing session injection for Home Assistant integration."""

import asyncio

from aiohttp import ClientSession

from pymelview import AuthenticationHandler, MelviewAPI


def handle_session_update(handler: AuthenticationHandler) -> None:
    """Report every new session credential."""
    credential = handler.credential
    if credential is not None:
        print(f"New MelView session, expires {credential.expiry_time()}")


async def main() -> None:
    """Demonstrate session injection pattern for HA integration."""
    async with ClientSession() as session:
        print("Using application-managed aiohttp session")

        auth = AuthenticationHandler(
            username="your@email.com",
            password="your_password",
            session=session,
            on_session_updated=handle_session_update,
        )
        api = MelviewAPI(
            username=auth.username,
            password=auth.password,
            session=session,  # Inject existing session
            auth_handler=auth,
        )

        async with api:
            await api.login()
            buildings = await api.discover() or []
            print(f"Found {len(buildings)} building(s) using injected session")

        # Session remains open after client exits
        print("\nClient closed, but session still available for other requests")


if __name__ == "__main__":
    asyncio.run(main())
