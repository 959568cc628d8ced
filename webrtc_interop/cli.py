"""CLI entry point for the browser interop harness."""

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

import aiohttp

from webrtc_interop.browsers import ALL_BROWSERS, UnknownBrowserError, build_matrix
from webrtc_interop.models.scenario import HarnessSettings, Scenario
from webrtc_interop.orchestrator import TestRunCoordinator
from webrtc_interop.readiness import ServerNotReadyError, check_server
from webrtc_interop.report import format_output, log_results_summary, summarize
from webrtc_interop.scenarios import (
    DEFAULT_SCENARIO,
    SCENARIOS,
    UnknownScenarioError,
    get_scenario,
    load_scenario_file,
)
from webrtc_interop.session import BrowserSessionManager

BROWSER_ENV_VAR = "BROWSER"


def select_browsers(
    argument: str | None, environ: Mapping[str, str] = os.environ
) -> str:
    """Pick the browser selection; the positional argument wins over the env."""
    return argument or environ.get(BROWSER_ENV_VAR) or ALL_BROWSERS


def log_run_header(
    log: logging.Logger, scenario: Scenario, server_url: str, selection: str
) -> None:
    """Log the scenario title, server and browser selection."""
    log.info("%s", scenario.title)
    log.info("%s", "=" * len(scenario.title))
    log.info("Server: %s", server_url)
    log.info("Browser: %s", selection)


def format_catalog(scenarios: Sequence[Scenario]) -> Sequence[str]:
    """Format one line per scenario for --list-scenarios."""
    width = max((len(s.name) for s in scenarios), default=0)
    return [
        f"{s.name.ljust(width)}  {s.server_url}  {s.timeout:g}s" for s in scenarios
    ]


async def run(
    scenario: Scenario,
    selection: str,
    server_url: str | None = None,
    timeout: float | None = None,
    settings: HarnessSettings | None = None,
) -> int:
    """Run a scenario across the selected browsers and return the exit code."""
    log = logging.getLogger("webrtc_interop")
    settings = settings or HarnessSettings()
    target = scenario.target(server_url)

    log_run_header(log, scenario, target.base_url, selection)

    try:
        matrix = build_matrix(selection)
    except UnknownBrowserError as e:
        log.error("%s", e)
        return 1

    async with aiohttp.ClientSession() as http:
        try:
            await check_server(
                http, target, scenario.start_command, settings.status_timeout
            )
        except ServerNotReadyError as e:
            log.error("Error: Server is not running at %s (%s)", e.server_url, e.reason)
            log.error("Start it with: %s", e.start_command)
            return 1

        async with BrowserSessionManager.start(settings) as sessions:
            coordinator = TestRunCoordinator(
                sessions=sessions,
                http=http,
                scenario=scenario,
                settings=settings,
                timeout=timeout,
            )
            results = await coordinator.run(matrix, target)

    summary = summarize(results)
    log_results_summary(log, summary, scenario.title, scenario.metrics)

    print(json.dumps(format_output(summary, scenario.name), indent=2))

    return summary.exit_code


def load_scenario(name: str, scenario_file: Path | None) -> Scenario:
    """Resolve the scenario from a file if given, else from the catalog."""
    if scenario_file is not None:
        return load_scenario_file(scenario_file)
    return get_scenario(name)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run WebRTC interop scenarios in headless browsers"
    )
    parser.add_argument(
        "browser",
        nargs="?",
        default=None,
        help=(
            "Browser to test (chrome, chromium, firefox, safari, webkit, all); "
            f"falls back to ${BROWSER_ENV_VAR}, then 'all'"
        ),
    )
    parser.add_argument(
        "--scenario",
        default=DEFAULT_SCENARIO,
        help=f"Built-in scenario name (default: {DEFAULT_SCENARIO})",
    )
    parser.add_argument(
        "--scenario-file",
        type=Path,
        default=None,
        help="JSON file with a custom scenario definition",
    )
    parser.add_argument(
        "--list-scenarios",
        action="store_true",
        help="List built-in scenarios and exit",
    )
    parser.add_argument(
        "--server-url",
        default=None,
        help="Override the scenario's server URL",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Override the per-browser result deadline in seconds",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show browser windows instead of running headless",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    log = logging.getLogger("webrtc_interop")

    if args.list_scenarios:
        for line in format_catalog(SCENARIOS):
            print(line)
        sys.exit(0)

    try:
        scenario = load_scenario(args.scenario, args.scenario_file)
    except (UnknownScenarioError, OSError, ValueError) as e:
        log.error("Cannot load scenario: %s", e)
        sys.exit(1)

    try:
        exit_code = asyncio.run(
            run(
                scenario=scenario,
                selection=select_browsers(args.browser),
                server_url=args.server_url,
                timeout=args.timeout,
                settings=HarnessSettings(headless=not args.headed),
            )
        )
    except Exception:
        log.exception("Fatal error")
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
