"""Models for browser run outcomes."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal

TIMEOUT_ERROR = "Test timeout"


@dataclass(frozen=True, kw_only=True)
class ResultRecord:
    """Canonical outcome of one browser attempt.

    ``metrics`` carries whatever scenario-specific fields the page reported,
    untouched by the harness.
    """

    browser: str
    status: Literal["success", "failure", "timeout", "skipped"]
    error: str | None = None
    duration: float = 0.0
    metrics: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def success(self) -> bool:
        return self.status == "success"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @property
    def timed_out(self) -> bool:
        return self.status == "timeout"

    @classmethod
    def skip(cls, browser: str, reason: str) -> "ResultRecord":
        """Build the record for a browser that was never attempted."""
        return cls(browser=browser, status="skipped", error=reason)

    @classmethod
    def failure(
        cls, browser: str, error: str, duration: float = 0.0
    ) -> "ResultRecord":
        """Build the record for an attempt that raised."""
        return cls(browser=browser, status="failure", error=error, duration=duration)

    @classmethod
    def from_payload(
        cls,
        browser: str,
        payload: Mapping[str, Any],
        duration: float = 0.0,
        *,
        timed_out: bool = False,
    ) -> "ResultRecord":
        """Normalize a page result object into a record.

        Only ``success`` is required; ``error`` is lifted out and every other
        field is kept as a metric.
        """
        metrics = {
            key: value
            for key, value in payload.items()
            if key not in {"success", "error", "browser"}
        }
        error = payload.get("error")
        if timed_out:
            status: Literal["success", "failure", "timeout"] = "timeout"
        elif payload.get("success") is True:
            status = "success"
        else:
            status = "failure"
        return cls(
            browser=browser,
            status=status,
            error=str(error) if error is not None else None,
            duration=duration,
            metrics=MappingProxyType(metrics),
        )
