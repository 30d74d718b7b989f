"""NWS API transport: headers, timeouts, deadlines and optional retry."""

import json
import logging
import time
from typing import Any

import httpx

from skycover.config.schema import DEFAULT_USER_AGENT, NWS_BASE_URL, ApiConfig
from skycover.errors import DeadlineExceeded, ParseError, UpstreamError

logger = logging.getLogger(__name__)


class NwsClient:
    def __init__(
        self,
        base_url: str = NWS_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        max_retries: int = 0,
        retry_base_delay: float = 5.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay

    @classmethod
    def from_config(cls, config: ApiConfig) -> "NwsClient":
        return cls(
            base_url=config.host,
            user_agent=config.user_agent,
            timeout=config.timeout_seconds,
            max_retries=config.max_retries,
            retry_base_delay=config.retry_base_delay,
        )

    def get_json(self, url: str, deadline: float | None = None) -> dict[str, Any]:
        """GET ``url`` and decode its JSON body.

        ``deadline`` is an absolute ``time.monotonic()`` value bounding the
        whole request, body included. Retries on 503/429 with exponential
        backoff, up to ``max_retries`` times.
        """
        headers = {"User-Agent": self.user_agent, "Accept": "application/geo+json"}

        for attempt in range(self.max_retries + 1):
            status_code, content = self._get(url, headers, deadline)

            if status_code in (503, 429) and attempt < self.max_retries:
                delay = self.retry_base_delay * (2**attempt)
                logger.warning(
                    "NWS %s returned %d, retrying in %.1fs (attempt %d/%d)",
                    url, status_code, delay, attempt + 1, self.max_retries,
                )
                self._sleep(url, delay, deadline)
                continue
            if not 200 <= status_code < 300:
                logger.warning("NWS %s returned %d", url, status_code)
                raise UpstreamError(f"HTTP {status_code}", url, status_code)
            try:
                body = json.loads(content)
            except ValueError as e:
                raise ParseError(f"invalid JSON: {e}", url) from e
            if not isinstance(body, dict):
                raise ParseError("expected a JSON object", url)
            return body

        raise AssertionError("unreachable")

    def _get(
        self, url: str, headers: dict[str, str], deadline: float | None
    ) -> tuple[int, bytes]:
        """Stream the response body, checking the deadline between chunks."""
        timeout = self._remaining(url, deadline)
        chunks: list[bytes] = []
        try:
            with httpx.stream(
                "GET", url, headers=headers, timeout=timeout, follow_redirects=True
            ) as resp:
                for chunk in resp.iter_bytes():
                    self._check_deadline(url, deadline)
                    chunks.append(chunk)
                status_code = resp.status_code
        except httpx.TimeoutException as e:
            if deadline is not None and time.monotonic() >= deadline:
                raise DeadlineExceeded("deadline exceeded", url) from e
            logger.warning("NWS request to %s timed out: %s", url, e)
            raise UpstreamError(f"request timed out: {e}", url) from e
        except httpx.RequestError as e:
            logger.warning("NWS request to %s failed: %s", url, e)
            raise UpstreamError(f"request failed: {e}", url) from e
        self._check_deadline(url, deadline)
        return status_code, b"".join(chunks)

    def _check_deadline(self, url: str, deadline: float | None) -> None:
        if deadline is not None and time.monotonic() >= deadline:
            raise DeadlineExceeded("deadline exceeded reading response", url)

    def _remaining(self, url: str, deadline: float | None) -> float:
        if deadline is None:
            return self.timeout
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise DeadlineExceeded("deadline exceeded", url)
        return min(self.timeout, remaining)

    def _sleep(self, url: str, delay: float, deadline: float | None) -> None:
        if deadline is not None and time.monotonic() + delay >= deadline:
            raise DeadlineExceeded("deadline exceeded while backing off", url)
        time.sleep(delay)
