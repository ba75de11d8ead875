"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import ClientSession, web
from multidict import CIMultiDict


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable


SAMPLE_ACCOUNT = {"userid": "u-1", "fullname": "Test User", "usertype": "0"}

SAMPLE_BUILDINGS = [
    {
        "buildingid": "b-1",
        "building": "Home",
        "units": [{"unitid": "123456", "room": "Lounge", "power": "q"}],
    }
]

SAMPLE_CAPABILITIES = {"unitid": "123456", "hasairdir": 1, "max": {"1": {"min": 16, "max": 31}}}

SAMPLE_STATE = {"id": "123456", "power": 1, "setmode": 1, "settemp": "22", "roomtemp": "21.5"}


@dataclass
class FakeMelview:
    """Mutable state of the emulated MelView server."""

    requests: list[dict[str, Any]] = field(default_factory=list)
    command_response: dict[str, Any] = field(default_factory=lambda: {"error": "ok", "lc": ""})
    local_status: int = HTTPStatus.OK
    login_token: str = "token-123"
    login_json: bool = True

    def paths(self) -> list[str]:
        """Return the paths requested so far, in order."""
        return [request["path"] for request in self.requests]


@pytest.fixture
async def mock_session() -> AsyncGenerator[ClientSession]:
    """Create a mock aiohttp ClientSession.

    Yields:
        Mock ClientSession for testing.
    """
    session = AsyncMock(spec=ClientSession)
    session.closed = False

    async def mock_close() -> None:
        session.closed = True

    session.close = mock_close

    yield session

    if not session.closed:
        await session.close()


@pytest.fixture
def login_response() -> Callable[..., MagicMock]:
    """Return a factory for mock login responses."""
    return _make_login_response


def _make_login_response(
    *,
    status: int = HTTPStatus.OK,
    set_cookie: list[str] | None = None,
    body: Any = None,
) -> MagicMock:
    """Create a mock aiohttp ClientResponse for the login endpoint."""
    headers: CIMultiDict[str] = CIMultiDict()
    for value in set_cookie if set_cookie is not None else ["auth=token-123; Max-Age=3600; path=/"]:
        headers.add("Set-Cookie", value)

    response = MagicMock()
    response.status = status
    response.headers = headers
    if isinstance(body, Exception):
        response.json = AsyncMock(side_effect=body)
    else:
        response.json = AsyncMock(return_value=SAMPLE_ACCOUNT if body is None else body)
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response


@pytest.fixture
def fake_melview() -> FakeMelview:
    """Create the state shared by the emulated server and the test."""
    return FakeMelview()


@pytest.fixture
def melview_app(fake_melview: FakeMelview) -> web.Application:
    """Create an aiohttp application emulating the MelView API and a unit's LAN endpoint."""
    app = web.Application()

    async def record(request: web.Request) -> None:
        fake_melview.requests.append(
            {
                "path": request.path,
                "body": await request.text(),
                "cookie": request.headers.get("Cookie"),
                "content_type": request.headers.get("Content-Type"),
                "user_agent": request.headers.get("User-Agent"),
            }
        )

    async def login(request: web.Request) -> web.Response:
        await record(request)
        if fake_melview.login_json:
            response = web.json_response(SAMPLE_ACCOUNT)
        else:
            response = web.Response(text="<html>maintenance</html>", content_type="text/html")
        response.set_cookie("auth", fake_melview.login_token, max_age=3600)
        return response

    async def rooms(request: web.Request) -> web.Response:
        await record(request)
        return web.json_response(SAMPLE_BUILDINGS)

    async def capabilities(request: web.Request) -> web.Response:
        await record(request)
        return web.json_response(SAMPLE_CAPABILITIES)

    async def unit_command(request: web.Request) -> web.Response:
        await record(request)
        payload = await request.json()
        if "commands" in payload:
            return web.json_response(fake_melview.command_response)
        return web.json_response(SAMPLE_STATE)

    async def smart(request: web.Request) -> web.Response:
        await record(request)
        return web.Response(status=fake_melview.local_status, text="<LSV><ok/></LSV>")

    async def broken(request: web.Request) -> web.Response:
        await record(request)
        return web.Response(text="<html>not json</html>", content_type="text/html")

    async def server_error(request: web.Request) -> web.Response:
        await record(request)
        return web.Response(status=HTTPStatus.INTERNAL_SERVER_ERROR)

    app.router.add_post("/api/login.aspx", login)
    app.router.add_post("/api/rooms.aspx", rooms)
    app.router.add_post("/api/unitcapabilities.aspx", capabilities)
    app.router.add_post("/api/unitcommand.aspx", unit_command)
    app.router.add_post("/smart", smart)
    app.router.add_post("/api/broken.aspx", broken)
    app.router.add_post("/api/error.aspx", server_error)

    return app
