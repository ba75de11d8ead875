"""Pytest configuration and fixtures for integration tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

from pymelview import MelviewAPI
from pymelview.const import DEFAULT_BASE_URL


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


# Load .env file from project root
env_path = Path(__file__).parents[2] / ".env"
load_dotenv(env_path)


@pytest.fixture(scope="session")
def integration_config() -> dict[str, str]:
    """Load integration test configuration from environment.

    Returns:
        Dictionary with API credentials and configuration.
    """
    username = os.getenv("MELVIEW_USERNAME")
    password = os.getenv("MELVIEW_PASSWORD")
    base_url = os.getenv("MELVIEW_API_BASE_URL", DEFAULT_BASE_URL)

    if not username or not password:
        pytest.skip("Create a .env file with MELVIEW_USERNAME and MELVIEW_PASSWORD to run integration tests")

    return {
        "username": username,
        "password": password,
        "base_url": base_url,
    }


@pytest.fixture
async def integration_api(integration_config: dict[str, str]) -> AsyncGenerator[MelviewAPI]:
    """Create a logged-in client against the real API."""
    async with MelviewAPI(
        username=integration_config["username"],
        password=integration_config["password"],
        base_url=integration_config["base_url"],
    ) as api:
        await api.login()
        yield api
