"""Models describing browser engines and how to launch them."""

from collections.abc import Mapping, Sequence
from typing import Literal, TypeAlias

from pydantic import Field

from webrtc_interop.models.base import Model

BrowserId: TypeAlias = Literal["chrome", "firefox", "safari"]
EngineName: TypeAlias = Literal["chromium", "firefox", "webkit"]


class LaunchConfig(Model):
    """Declarative launch configuration for one engine variant."""

    args: Sequence[str] = Field(
        default_factory=tuple, description="Command line arguments for the engine"
    )
    permissions: Sequence[str] = Field(
        default_factory=tuple,
        description="Permissions granted on the browsing context",
    )
    user_prefs: Mapping[str, str | int | bool] = Field(
        default_factory=dict,
        description="Preference overrides (only honored at launch time)",
    )

    def launch_options(self, *, headless: bool = True) -> dict[str, object]:
        """Return keyword arguments for ``BrowserType.launch``."""
        options: dict[str, object] = {"headless": headless}
        if self.args:
            options["args"] = list(self.args)
        if self.user_prefs:
            options["firefox_user_prefs"] = dict(self.user_prefs)
        return options

    def context_options(self) -> dict[str, object]:
        """Return keyword arguments for ``Browser.new_context``."""
        if self.permissions:
            return {"permissions": list(self.permissions)}
        return {}


class BrowserSpec(Model):
    """A supported browser and the engine variant that drives it."""

    id: BrowserId = Field(..., description="Browser identifier used in reports")
    engine: EngineName = Field(..., description="Playwright engine name")
    launch: LaunchConfig = Field(default_factory=LaunchConfig)


class MatrixEntry(Model):
    """One browser in a run's matrix."""

    spec: BrowserSpec
    explicit: bool = Field(
        default=False, description="Browser was named directly, not via 'all'"
    )
