"""
Metadata dump download.

Fetches a nixpkgs `packages.json` (or any compatible dump) so later runs
can resolve packages offline through JSONDumpRepository.
"""

import asyncio
import logging
from pathlib import Path

import aiofiles
import httpx

from deferred_apps.core.errors import ConfigError
from deferred_apps.core.resilience import TRANSIENT_ERRORS, RetryPolicy

logger = logging.getLogger(__name__)


async def _request(client: httpx.AsyncClient, url: str, policy: RetryPolicy) -> httpx.Response:
    """GET `url`, retrying transport errors and 429/5xx responses per `policy`."""
    attempt = 0
    while True:
        try:
            resp = await client.get(url)
        except TRANSIENT_ERRORS as e:
            delay = policy.wait_after(attempt)
            if delay is None:
                raise ConfigError(
                    f"deferred-apps: failed to download {url} after {attempt + 1} attempts: {e}"
                ) from e
            logger.debug(f"[FETCH] {type(e).__name__}, retry {attempt + 1} after {delay:.1f}s")
        else:
            delay = policy.wait_after(attempt, resp)
            if delay is None:
                return resp
            logger.warning(f"[FETCH] HTTP {resp.status_code} from {url}. Waiting {delay:.1f}s...")

        await asyncio.sleep(delay)
        attempt += 1


async def download_metadata_dump(
    url: str,
    dest: Path,
    policy: RetryPolicy | None = None,
    client: httpx.AsyncClient | None = None,
) -> Path:
    """
    Download a metadata dump to `dest`.

    Args:
        url: Location of the JSON dump.
        dest: File to write; parent directories are created.
        policy: Retry policy (defaults to 3 retries).
        client: Optional preconfigured client (tests pass a mock transport).

    Returns:
        The destination path.

    Raises:
        ConfigError: on a non-200 response or when retries are exhausted.
    """
    policy = policy or RetryPolicy()
    dest = Path(dest)

    if client is None:
        timeout = httpx.Timeout(30.0, connect=60.0)
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
            resp = await _request(owned, url, policy)
    else:
        resp = await _request(client, url, policy)

    if resp.status_code != 200:
        raise ConfigError(f"deferred-apps: download of {url} failed with HTTP {resp.status_code}")

    dest.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(dest, "wb") as f:
        await f.write(resp.content)

    logger.info(f"[FETCH] Saved {len(resp.content) / (1024 * 1024):.2f} MB to {dest}")
    return dest
