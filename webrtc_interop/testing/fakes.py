"""In-memory stand-ins for the Playwright objects the harness drives."""

import asyncio
import time
from collections import defaultdict
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class FakeConsoleMessage:
    """Console message carrying only its text."""

    text: str


@dataclass(kw_only=True)
class FakePage:
    """Page whose result slot fills ``result_after`` seconds after creation."""

    result: Any = None
    result_after: float = 0.0
    evaluate_delay: float = 0.0
    goto_error: Exception | None = None
    evaluate_error: Exception | None = None
    close_error: Exception | None = None
    closed: bool = False
    visited: list[tuple[str, float | None]] = field(default_factory=list)
    evaluations: int = 0
    handlers: dict[str, list[Callable[[Any], None]]] = field(
        default_factory=lambda: defaultdict(list)
    )
    created_at: float = field(default_factory=time.monotonic)

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        self.handlers[event].append(handler)

    def emit_console(self, text: str) -> None:
        for handler in self.handlers["console"]:
            handler(FakeConsoleMessage(text))

    async def goto(self, url: str, timeout: float | None = None) -> None:
        self.visited.append((url, timeout))
        if self.goto_error is not None:
            raise self.goto_error

    async def evaluate(self, expression: str) -> Any:
        self.evaluations += 1
        await asyncio.sleep(self.evaluate_delay)
        if self.evaluate_error is not None:
            raise self.evaluate_error
        if time.monotonic() - self.created_at >= self.result_after:
            return self.result
        return None

    async def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


@dataclass(kw_only=True)
class FakeContext:
    """Browsing context handing out a prepared page."""

    page: FakePage
    options: Mapping[str, Any] = field(default_factory=dict)
    new_page_error: Exception | None = None
    close_error: Exception | None = None
    closed: bool = False

    async def new_page(self) -> FakePage:
        if self.new_page_error is not None:
            raise self.new_page_error
        return self.page

    async def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


@dataclass(kw_only=True)
class FakeBrowser:
    """Browser process creating one context."""

    context: FakeContext
    close_error: Exception | None = None
    closed: bool = False

    async def new_context(self, **options: Any) -> FakeContext:
        self.context.options = options
        return self.context

    async def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


@dataclass(kw_only=True)
class FakeBrowserType:
    """Engine launcher building a fresh browser per launch."""

    name: str
    page_factory: Callable[[], FakePage] = FakePage
    launch_error: Exception | None = None
    launches: list[Mapping[str, Any]] = field(default_factory=list)
    browsers: list[FakeBrowser] = field(default_factory=list)

    async def launch(self, **options: Any) -> FakeBrowser:
        self.launches.append(options)
        if self.launch_error is not None:
            raise self.launch_error
        browser = FakeBrowser(context=FakeContext(page=self.page_factory()))
        self.browsers.append(browser)
        return browser

    @property
    def pages(self) -> Sequence[FakePage]:
        return [browser.context.page for browser in self.browsers]


@dataclass(kw_only=True)
class FakePlaywright:
    """Driver exposing the three engines."""

    chromium: FakeBrowserType = field(
        default_factory=lambda: FakeBrowserType(name="chromium")
    )
    firefox: FakeBrowserType = field(
        default_factory=lambda: FakeBrowserType(name="firefox")
    )
    webkit: FakeBrowserType = field(
        default_factory=lambda: FakeBrowserType(name="webkit")
    )
