"""Waiting for the in-page test logic to publish its result.

The page assigns its outcome to ``window.testResult``. The harness polls that
slot on a short interval and races the poll against a per-call deadline; the
page itself is never interrupted, it is simply abandoned when the deadline
wins.
"""

import asyncio
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from webrtc_interop.models.result import TIMEOUT_ERROR

log = logging.getLogger(__name__)

RESULT_SLOT = "testResult"

READ_RESULT_SLOT = f"() => window.{RESULT_SLOT} ?? null"

TIMEOUT_PAYLOAD: Mapping[str, Any] = {"success": False, "error": TIMEOUT_ERROR}

FINAL_READ_TIMEOUT = 0.5


@dataclass(frozen=True, kw_only=True)
class AcquiredResult:
    """Payload read from the page, or the synthetic timeout payload."""

    payload: Mapping[str, Any]
    timed_out: bool = False


def normalize_payload(value: Any) -> Mapping[str, Any]:
    """Coerce whatever the page stored into a result mapping."""
    if isinstance(value, Mapping):
        return value
    return {"success": False, "error": f"Invalid test result: {value!r}"}


async def poll_result_slot(
    page: Page, poll_interval: float = 0.1
) -> Mapping[str, Any]:
    """Evaluate the result slot until it is populated.

    Checks are scheduled at fixed offsets from the first one, so slow
    evaluations do not push later checks back. Ticks already missed are
    skipped rather than replayed.
    """
    loop = asyncio.get_running_loop()
    start = loop.time()
    tick = 0
    while True:
        value = await page.evaluate(READ_RESULT_SLOT)
        if value is not None:
            return normalize_payload(value)
        elapsed = loop.time() - start
        tick = max(tick + 1, math.floor(elapsed / poll_interval) + 1)
        await asyncio.sleep(max(0.0, start + tick * poll_interval - loop.time()))


async def read_result_slot(
    page: Page, timeout: float = FINAL_READ_TIMEOUT
) -> Mapping[str, Any] | None:
    """Read the slot once, bounded by ``timeout``. Returns None if unreadable."""
    try:
        value = await asyncio.wait_for(page.evaluate(READ_RESULT_SLOT), timeout)
    except (PlaywrightError, TimeoutError) as e:
        log.debug("Final read of the result slot failed: %s", e)
        return None
    if value is None:
        return None
    return normalize_payload(value)


async def await_result(
    page: Page,
    deadline: float,
    poll_interval: float = 0.1,
) -> AcquiredResult:
    """Wait for the page result or the deadline, whichever comes first.

    When the deadline fires the slot is read one last time, so a result
    published before the deadline is never reported as a timeout.

    Args:
        page: Page running the scenario's test logic
        deadline: Seconds to wait before giving up
        poll_interval: Seconds between evaluations of the result slot

    Returns:
        The page's payload, or the timeout payload if the deadline fired

    Raises:
        playwright.async_api.Error: If evaluating the slot fails

    """
    poller = asyncio.create_task(poll_result_slot(page, poll_interval))
    try:
        done, _ = await asyncio.wait({poller}, timeout=deadline)
    finally:
        if not poller.done():
            poller.cancel()
            await asyncio.gather(poller, return_exceptions=True)

    if poller in done:
        return AcquiredResult(payload=poller.result())

    payload = await read_result_slot(page, min(FINAL_READ_TIMEOUT, deadline))
    if payload is not None:
        log.debug("Result slot filled at the deadline")
        return AcquiredResult(payload=payload)

    log.debug("Result slot still empty after %.1fs", deadline)
    return AcquiredResult(payload=TIMEOUT_PAYLOAD, timed_out=True)
