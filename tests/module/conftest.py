"""Fixtures for module tests using a WireMock testcontainer and real browsers."""

from collections.abc import AsyncGenerator, Generator

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright
from testcontainers.core import testcontainers_config
from wiremock.constants import Config
from wiremock.testing.testcontainer import WireMockContainer


@pytest.fixture(scope="session", autouse=True)
def _disable_ryuk() -> None:
    """Disable the extra cleanup instance, we use contexts to clean containers."""
    testcontainers_config.ryuk_disabled = True


@pytest.fixture(scope="session")
def wiremock_server() -> Generator[WireMockContainer, None, None]:
    """Start WireMock to stand in for the peer server."""
    try:
        container = WireMockContainer(secure=False)
        wm = container.start()
    except Exception as e:
        pytest.skip(f"Docker is not available: {e}")

    try:
        Config.base_url = wm.get_url("__admin")
        yield wm
        print(wm.get_logs())
    finally:
        container.stop()


@pytest.fixture(scope="session")
def server_url(wiremock_server: WireMockContainer) -> str:
    """Base URL of the stand-in peer server, as seen from the host."""
    return wiremock_server.get_url("").rstrip("/")


@pytest.fixture
async def chromium_available() -> AsyncGenerator[None, None]:
    """Skip when the Playwright Chromium build is not installed."""
    async with async_playwright() as playwright:
        try:
            browser = await playwright.chromium.launch()
        except PlaywrightError as e:
            pytest.skip(f"Chromium is not installed: {e.message}")
        await browser.close()
    yield
