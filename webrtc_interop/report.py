"""Aggregation and rendering of per-browser results."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from webrtc_interop.models.result import ResultRecord
from webrtc_interop.models.scenario import MetricLine

STATUS_MARKERS = {
    "success": "✓ PASS",
    "failure": "✗ FAIL",
    "timeout": "⏱ FAIL",
    "skipped": "- SKIP",
}

DETAIL_INDENT = " " * 7


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Ordered results of a run plus its aggregates.

    Skipped records are listed but never counted in ``passed`` or ``total``.
    """

    results: Sequence[ResultRecord]
    passed: int
    total: int

    @property
    def exit_code(self) -> int:
        return 0 if self.passed == self.total else 1

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.skipped)

    @property
    def nothing_attempted(self) -> bool:
        return self.total == 0


def summarize(results: Sequence[ResultRecord]) -> RunSummary:
    """Compute pass/total over the records that were actually attempted."""
    attempted = [r for r in results if not r.skipped]
    return RunSummary(
        results=tuple(results),
        passed=sum(1 for r in attempted if r.success),
        total=len(attempted),
    )


def render_result(
    result: ResultRecord, metrics: Sequence[MetricLine] = ()
) -> Sequence[str]:
    """Render the summary lines for one record."""
    marker = STATUS_MARKERS[result.status]
    if result.skipped:
        return [f"{marker} - {result.browser} ({result.error})"]

    lines = [f"{marker} - {result.browser}"]
    if result.success:
        lines.extend(
            f"{DETAIL_INDENT}{line.render(result.metrics)}" for line in metrics
        )
    elif result.error:
        lines.append(f"{DETAIL_INDENT}Error: {result.error}")
    return lines


def log_results_summary(
    log: logging.Logger,
    summary: RunSummary,
    title: str = "Test",
    metrics: Sequence[MetricLine] = (),
) -> None:
    """Log the summary block and the final verdict."""
    log.info("=" * 60)
    log.info("%s SUMMARY", title.upper())
    log.info("=" * 60)

    for result in summary.results:
        for line in render_result(result, metrics):
            log.info("%s", line)

    log.info("=" * 60)

    if summary.nothing_attempted:
        log.warning(
            "No browsers were attempted (%d skipped); nothing was verified",
            summary.skipped,
        )
    elif summary.exit_code == 0:
        log.info("All browsers PASSED! (%d/%d)", summary.passed, summary.total)
    else:
        log.info(
            "Some tests FAILED! (%d/%d passed)", summary.passed, summary.total
        )


def format_output(summary: RunSummary, scenario: str) -> dict[str, Any]:
    """Format a run summary for JSON output."""
    return {
        "scenario": scenario,
        "total": summary.total,
        "passed": summary.passed,
        "failed": sum(1 for r in summary.results if r.status == "failure"),
        "timeouts": sum(1 for r in summary.results if r.timed_out),
        "skipped": summary.skipped,
        "results": [
            {
                "browser": r.browser,
                "status": r.status,
                "success": r.success,
                "error": r.error,
                "duration": r.duration,
                "metrics": dict(r.metrics),
            }
            for r in summary.results
        ],
    }
