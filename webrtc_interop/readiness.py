"""Reachability checks against the peer server."""

import logging

import aiohttp

from webrtc_interop.models.scenario import RunTarget

log = logging.getLogger(__name__)


class ServerNotReadyError(RuntimeError):
    """Raised when the peer server does not answer its status probe."""

    def __init__(self, server_url: str, start_command: str, reason: str) -> None:
        super().__init__(f"Server is not running at {server_url}: {reason}")
        self.server_url = server_url
        self.start_command = start_command
        self.reason = reason


async def check_server(
    session: aiohttp.ClientSession,
    target: RunTarget,
    start_command: str,
    timeout: float = 5.0,
) -> None:
    """Probe ``GET /status`` and fail fast if the server is not up.

    Raises:
        ServerNotReadyError: On connection failure, timeout or an error status

    """
    url = target.endpoint("status")
    log.debug("Probing server status at %s", url)

    try:
        async with session.get(
            url, timeout=aiohttp.ClientTimeout(total=timeout)
        ) as response:
            if not response.ok:
                raise ServerNotReadyError(
                    target.base_url,
                    start_command,
                    f"status endpoint returned {response.status}",
                )
    except (aiohttp.ClientError, TimeoutError) as e:
        raise ServerNotReadyError(
            target.base_url, start_command, str(e) or type(e).__name__
        ) from e

    log.info("Server is ready at %s", target.base_url)


async def reset_server(
    session: aiohttp.ClientSession,
    target: RunTarget,
    timeout: float = 5.0,
) -> None:
    """Ask the server to drop per-client state. Failures are only logged."""
    url = target.endpoint("reset")
    try:
        async with session.get(
            url, timeout=aiohttp.ClientTimeout(total=timeout)
        ) as response:
            if not response.ok:
                log.warning("Server reset returned %d", response.status)
    except (aiohttp.ClientError, TimeoutError) as e:
        log.warning("Server reset failed: %s", e)
