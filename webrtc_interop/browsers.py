"""Supported browser engines and matrix selection."""

from collections.abc import Mapping, Sequence

from webrtc_interop.models.browser import BrowserSpec, LaunchConfig, MatrixEntry

ALL_BROWSERS = "all"

CHROME = BrowserSpec(
    id="chrome",
    engine="chromium",
    launch=LaunchConfig(
        args=(
            "--use-fake-ui-for-media-stream",
            "--use-fake-device-for-media-stream",
            "--autoplay-policy=no-user-gesture-required",
        ),
        permissions=("camera", "microphone"),
    ),
)

# Firefox reads these preferences only at startup.
FIREFOX = BrowserSpec(
    id="firefox",
    engine="firefox",
    launch=LaunchConfig(
        user_prefs={
            "media.navigator.streams.fake": True,
            "media.navigator.permission.disabled": True,
        },
    ),
)

SAFARI = BrowserSpec(id="safari", engine="webkit")

BROWSERS: Sequence[BrowserSpec] = (CHROME, FIREFOX, SAFARI)

ALIASES: Mapping[str, str] = {
    "chromium": "chrome",
    "webkit": "safari",
}


class UnknownBrowserError(ValueError):
    """Raised when a browser identifier is not recognized."""


def resolve_browser(key: str) -> BrowserSpec:
    """Resolve a browser id or alias to its spec.

    Raises:
        UnknownBrowserError: If no browser matches ``key``

    """
    normalized = key.strip().lower()
    normalized = ALIASES.get(normalized, normalized)

    for spec in BROWSERS:
        if spec.id == normalized:
            return spec

    available = [spec.id for spec in BROWSERS] + list(ALIASES) + [ALL_BROWSERS]
    raise UnknownBrowserError(
        f"Unknown browser '{key}'. Available browsers: {available}"
    )


def build_matrix(selection: str) -> Sequence[MatrixEntry]:
    """Build the ordered browser matrix for a selection (id, alias or 'all')."""
    if selection.strip().lower() == ALL_BROWSERS:
        return [MatrixEntry(spec=spec) for spec in BROWSERS]
    return [MatrixEntry(spec=resolve_browser(selection), explicit=True)]
