"""Test run coordinator driving one scenario across a browser matrix."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import aiohttp

from webrtc_interop.acquisition import await_result
from webrtc_interop.models.browser import BrowserSpec, MatrixEntry
from webrtc_interop.models.result import ResultRecord
from webrtc_interop.models.scenario import HarnessSettings, RunTarget, Scenario
from webrtc_interop.readiness import reset_server
from webrtc_interop.session import BrowserSessionManager

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class TestRunCoordinator:
    """Runs a scenario against each browser of a matrix, one at a time.

    Browsers are never run concurrently: they share the peer server and the
    synthetic media devices of the host.
    """

    __test__ = False

    sessions: BrowserSessionManager
    http: aiohttp.ClientSession = field(repr=False)
    scenario: Scenario
    settings: HarnessSettings = field(default_factory=HarnessSettings)
    timeout: float | None = None

    @property
    def deadline(self) -> float:
        """Seconds each browser gets to publish its result."""
        return self.timeout if self.timeout is not None else self.scenario.timeout

    async def run(
        self, matrix: Sequence[MatrixEntry], target: RunTarget
    ) -> Sequence[ResultRecord]:
        """Run every matrix entry in order and return one record per entry."""
        log.info(
            "Running scenario %s on %d browser(s)...", self.scenario.name, len(matrix)
        )
        results: list[ResultRecord] = []
        attempted = False

        for entry in matrix:
            rule = self.scenario.skip_rule(entry.spec.id, explicit=entry.explicit)
            if rule is not None:
                log.info("[%s] Skipping (%s)", entry.spec.id, rule.reason)
                results.append(ResultRecord.skip(entry.spec.id, rule.reason))
                continue

            if attempted:
                await self._settle(target)
            attempted = True

            results.append(await self.run_browser(entry.spec, target))

        log.info("Scenario %s completed", self.scenario.name)
        return results

    async def run_browser(self, spec: BrowserSpec, target: RunTarget) -> ResultRecord:
        """Attempt one browser; any error becomes a failing record."""
        log.info("=" * 60)
        log.info("Testing %s: %s", self.scenario.title, spec.id)
        log.info("=" * 60)

        loop = asyncio.get_running_loop()
        started = loop.time()

        try:
            async with self.sessions.open(spec, target) as session:
                page = await self.sessions.navigate(session, target)
                log.info("[%s] Running test...", spec.id)
                acquired = await await_result(
                    page, self.deadline, self.settings.poll_interval
                )
        except Exception as e:
            log.error("[%s] Error: %s", spec.id, e)
            return ResultRecord.failure(
                spec.id, str(e) or type(e).__name__, loop.time() - started
            )

        record = ResultRecord.from_payload(
            spec.id,
            acquired.payload,
            loop.time() - started,
            timed_out=acquired.timed_out,
        )
        log.info(
            "[%s] Test completed: status=%s duration=%.1fs",
            spec.id,
            record.status,
            record.duration,
        )
        if record.metrics:
            for line in self.scenario.metrics:
                log.info("[%s] %s", spec.id, line.render(record.metrics))
        if record.error:
            log.info("[%s] Error: %s", spec.id, record.error)
        return record

    async def _settle(self, target: RunTarget) -> None:
        """Let shared server state quiesce between browsers."""
        if self.scenario.reset_between:
            log.info("Resetting server state at %s", target.base_url)
            await reset_server(self.http, target, self.settings.status_timeout)
        if self.scenario.reset_between or self.scenario.settle_between:
            await asyncio.sleep(self.settings.settle_delay)
