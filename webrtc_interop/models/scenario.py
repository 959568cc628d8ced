"""Models for interop scenarios and run targets."""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import Field

from webrtc_interop.models.base import Model


class _MetricValues(dict[str, Any]):
    def __missing__(self, key: str) -> Any:
        return 0


class SkipRule(Model):
    """Known incompatibility between a browser and a scenario."""

    reason: str = Field(..., description="Reason shown on the SKIP line")
    explicit: bool = Field(
        default=False,
        description="Also skip when the browser is requested by name",
    )


class MetricLine(Model):
    """A labelled detail line rendered for passing results."""

    label: str = Field(..., description="Label printed before the value")
    template: str = Field(
        ..., description="str.format template over the result metrics"
    )

    def render(self, metrics: Mapping[str, Any]) -> str:
        """Render the line, treating absent metrics as 0."""
        values = _MetricValues(
            {
                key: ("YES" if value else "NO") if isinstance(value, bool) else value
                for key, value in metrics.items()
            }
        )
        return f"{self.label}: {self.template.format_map(values)}"


class RunTarget(Model):
    """Server under test plus the scenario name used in log lines."""

    server_url: str = Field(..., description="Base URL of the peer server")
    scenario: str | None = Field(default=None, description="Scenario name")

    @property
    def base_url(self) -> str:
        return self.server_url.rstrip("/")

    def endpoint(self, path: str) -> str:
        """Return the URL of a server endpoint such as ``status``."""
        return f"{self.base_url}/{path.lstrip('/')}"


class Scenario(Model):
    """An interop scenario: where its server lives and how to judge it."""

    name: str = Field(..., description="Scenario identifier")
    title: str = Field(..., description="Human-readable title for the run header")
    server_url: str = Field(..., description="Base URL of the scenario server")
    start_command: str = Field(
        ..., description="Command the operator runs to start the server"
    )
    timeout: float = Field(
        default=60.0, gt=0, description="Result deadline per browser in seconds"
    )
    skips: Mapping[str, SkipRule] = Field(
        default_factory=dict, description="Known incompatibilities by browser id"
    )
    metrics: Sequence[MetricLine] = Field(
        default_factory=tuple, description="Detail lines for passing results"
    )
    reset_between: bool = Field(
        default=False, description="Reset server state between browsers"
    )
    settle_between: bool = Field(
        default=False, description="Pause between browsers"
    )

    def target(self, server_url: str | None = None) -> RunTarget:
        """Build the run target, optionally overriding the server URL."""
        return RunTarget(server_url=server_url or self.server_url, scenario=self.name)

    def skip_rule(self, browser_id: str, *, explicit: bool) -> SkipRule | None:
        """Return the skip rule applying to ``browser_id``, if any.

        Rules without ``explicit`` only apply when the browser was reached
        through ``all``.
        """
        rule = self.skips.get(browser_id)
        if rule is None or (explicit and not rule.explicit):
            return None
        return rule


class HarnessSettings(Model):
    """Timing and launch constants shared by every scenario."""

    poll_interval: float = Field(default=0.1, gt=0)
    navigation_timeout: float = Field(default=10.0, gt=0)
    status_timeout: float = Field(default=5.0, gt=0)
    settle_delay: float = Field(default=1.0, ge=0)
    headless: bool = True
