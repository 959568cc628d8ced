"""Browser process, context and page lifecycle."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from playwright.async_api import (
    Browser,
    BrowserContext,
    ConsoleMessage,
    Page,
    Playwright,
    async_playwright,
)

from webrtc_interop.models.browser import BrowserSpec
from webrtc_interop.models.scenario import HarnessSettings, RunTarget

log = logging.getLogger(__name__)
page_log = logging.getLogger("webrtc_interop.page")

RESULT_PREFIX = "TEST_RESULT:"


@dataclass(frozen=True, kw_only=True)
class Session:
    """Resources owned by a single browser attempt."""

    browser_id: str
    browser: Browser = field(repr=False)
    context: BrowserContext | None = field(default=None, repr=False)
    page: Page | None = field(default=None, repr=False)


def forward_console(browser_id: str, message: ConsoleMessage) -> None:
    """Pass in-page console output through to the operator log."""
    text = message.text
    if text.startswith(RESULT_PREFIX):
        return
    page_log.info("[%s] %s", browser_id, text)


@dataclass(frozen=True, kw_only=True)
class BrowserSessionManager:
    """Launches and tears down browsers with their engine quirks applied."""

    playwright: Playwright = field(repr=False)
    settings: HarnessSettings = field(default_factory=HarnessSettings)

    @classmethod
    @asynccontextmanager
    async def start(
        cls, settings: HarnessSettings | None = None
    ) -> AsyncGenerator["BrowserSessionManager", None]:
        """Create a manager bound to a running Playwright driver."""
        async with async_playwright() as playwright:
            yield cls(playwright=playwright, settings=settings or HarnessSettings())

    async def acquire(self, spec: BrowserSpec, target: RunTarget) -> Session:
        """Launch ``spec`` and open an isolated context and page.

        If anything fails after the process is up, whatever was created is
        released before the error propagates.
        """
        log.info("[%s] Launching browser...", spec.id)
        log.debug(
            "[%s] Target %s (scenario=%s)", spec.id, target.base_url, target.scenario
        )

        browser_type = getattr(self.playwright, spec.engine)
        browser = await browser_type.launch(
            **spec.launch.launch_options(headless=self.settings.headless)
        )

        context: BrowserContext | None = None
        page: Page | None = None
        try:
            context = await browser.new_context(**spec.launch.context_options())
            page = await context.new_page()
            page.on("console", lambda message: forward_console(spec.id, message))
        except Exception:
            await self.release(
                Session(browser_id=spec.id, browser=browser, context=context, page=page)
            )
            raise

        return Session(browser_id=spec.id, browser=browser, context=context, page=page)

    async def navigate(self, session: Session, target: RunTarget) -> Page:
        """Load the scenario page, bounded by the navigation timeout."""
        if session.page is None:
            raise RuntimeError(f"Session for {session.browser_id} has no page")

        log.info("[%s] Loading test page...", session.browser_id)
        await session.page.goto(
            target.server_url, timeout=self.settings.navigation_timeout * 1000
        )
        return session.page

    async def release(self, session: Session) -> None:
        """Close page, context and browser. Never raises.

        Each resource is closed on its own so one failure does not leave the
        others running.
        """
        resources = (
            ("page", session.page),
            ("context", session.context),
            ("browser", session.browser),
        )
        for name, resource in resources:
            if resource is None:
                continue
            try:
                await resource.close()
            except Exception as e:
                log.debug("[%s] Failed to close %s: %s", session.browser_id, name, e)

    @asynccontextmanager
    async def open(
        self, spec: BrowserSpec, target: RunTarget
    ) -> AsyncGenerator[Session, None]:
        """Acquire a session and always release it on exit."""
        session = await self.acquire(spec, target)
        try:
            yield session
        finally:
            await self.release(session)
