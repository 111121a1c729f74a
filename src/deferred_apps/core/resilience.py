"""
Retry policy for metadata dump downloads.

Package resolution itself never retries; only `fetch-metadata` talks to
the network.
"""

import random
from dataclasses import dataclass

import httpx

TRANSIENT_ERRORS = (httpx.TimeoutException, httpx.ConnectError, httpx.RemoteProtocolError)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to retry a download and how long to wait in between."""

    retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    jitter: float = 0.25  # fraction of the delay, applied both ways

    def backoff(self, attempt: int) -> float:
        """Delay before retry number `attempt + 1`, doubling each time."""
        delay = min(self.base_delay * (2**attempt), self.max_delay)
        spread = delay * self.jitter * (random.random() * 2 - 1)
        return min(max(0.0, delay + spread), self.max_delay)

    @staticmethod
    def is_transient(response: httpx.Response) -> bool:
        """Rate limiting and server errors are worth another attempt."""
        return response.status_code == 429 or response.status_code >= 500

    def wait_after(self, attempt: int, response: httpx.Response | None = None) -> float | None:
        """
        Seconds to wait before retrying, or None to give up.

        `response` is None when the attempt failed with a transport error.
        A numeric Retry-After header wins over the computed backoff but is
        still capped at `max_delay`.
        """
        if attempt >= self.retries:
            return None
        if response is None:
            return self.backoff(attempt)
        if not self.is_transient(response):
            return None

        retry_after = response.headers.get("Retry-After", "")
        if retry_after.isdigit():
            return min(float(retry_after), self.max_delay)
        return self.backoff(attempt)
