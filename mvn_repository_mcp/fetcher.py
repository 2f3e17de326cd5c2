"""Rate-limited HTTP fetcher for mvnrepository.com.

The scraped host runs anti-bot defenses, so every request is paced:
- At least MIN_REQUEST_INTERVAL_SECONDS between successive dispatches, plus a
  random jitter drawn from [REQUEST_JITTER_MIN_SECONDS, REQUEST_JITTER_MAX_SECONDS)
- A 403 is read as a block and retried with a linear backoff plus jitter,
  up to BLOCK_MAX_RETRIES times; then BlockedError is raised
- Any other failure surfaces at once as NetworkError

The pacing clock is owned by the fetcher instance and guarded by an
asyncio.Lock, so concurrent callers queue behind one shared clock while
separate instances stay independent of each other.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from .config import Settings
from .errors import BlockedError, NetworkError

_logger = logging.getLogger(__name__)

# Requests whose path starts with this are sent without a Referer.
_SEARCH_PATH_PREFIX = "/search"

SleepFn = Callable[[float], Awaitable[Any]]
NowFn = Callable[[], float]


def _browser_headers(user_agent: str) -> Dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "DNT": "1",
        "Sec-GPC": "1",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Sec-Fetch-User": "?1",
        "Priority": "u=0, i",
        "Pragma": "no-cache",
        "Cache-Control": "no-cache",
    }


class RateLimitedFetcher:
    """Paced, block-aware async page fetcher for the scraped host.

    Parameters are sourced from Settings by default, but can be overridden
    for testability. `sleep_fn`, `now_fn` and `rng` let tests drive the pacing
    clock without real delays.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout_seconds: Optional[int] = None,
        min_interval_seconds: Optional[float] = None,
        jitter_range_seconds: Optional[tuple[float, float]] = None,
        max_retries: Optional[int] = None,
        backoff_step_seconds: Optional[float] = None,
        backoff_jitter_seconds: Optional[float] = None,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
        sleep_fn: SleepFn | None = None,
        now_fn: NowFn | None = None,
        rng: random.Random | None = None,
    ) -> None:
        s = Settings()
        self._base_url = (base_url or s.MVNREPOSITORY_BASE_URL).rstrip("/")
        if not self._base_url.lower().startswith("https://"):
            raise ValueError("Base URL must be HTTPS")

        self._timeout_seconds = int(
            timeout_seconds if timeout_seconds is not None else s.SCRAPE_TIMEOUT_SECONDS
        )
        if self._timeout_seconds < 1:
            raise ValueError("timeout_seconds must be >= 1")
        self._min_interval = float(
            min_interval_seconds
            if min_interval_seconds is not None
            else s.MIN_REQUEST_INTERVAL_SECONDS
        )
        jitter_lo, jitter_hi = jitter_range_seconds or (
            s.REQUEST_JITTER_MIN_SECONDS,
            s.REQUEST_JITTER_MAX_SECONDS,
        )
        if jitter_hi < jitter_lo:
            raise ValueError("jitter range must be (low, high) with high >= low")
        self._jitter_lo = float(jitter_lo)
        self._jitter_hi = float(jitter_hi)

        self._max_retries = int(max_retries if max_retries is not None else s.BLOCK_MAX_RETRIES)
        self._backoff_step = float(
            backoff_step_seconds
            if backoff_step_seconds is not None
            else s.BLOCK_BACKOFF_STEP_SECONDS
        )
        self._backoff_jitter = float(
            backoff_jitter_seconds
            if backoff_jitter_seconds is not None
            else s.BLOCK_BACKOFF_JITTER_SECONDS
        )

        self._client = client or httpx.AsyncClient(
            timeout=self._timeout_seconds,
            follow_redirects=True,
            max_redirects=5,
            headers=_browser_headers(user_agent or s.USER_AGENT),
        )
        self._sleep: SleepFn = sleep_fn or asyncio.sleep
        self._now: NowFn = now_fn or time.monotonic
        self._rng = rng or random.Random()

        # Pacing state: monotonic time of the last dispatch, None before the first.
        self._pace_lock = asyncio.Lock()
        self._last_dispatch: float | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    def _draw(self, low: float, high: float) -> float:
        """Uniform draw from [low, high)."""
        return low + self._rng.random() * (high - low)

    async def _pace(self) -> None:
        # Held across the sleep so that concurrent callers queue on one clock.
        async with self._pace_lock:
            jitter = self._draw(self._jitter_lo, self._jitter_hi)
            if self._last_dispatch is None:
                delay = jitter
            else:
                elapsed = self._now() - self._last_dispatch
                if elapsed < self._min_interval:
                    delay = self._min_interval - elapsed + jitter
                else:
                    delay = jitter
            if delay > 0:
                await self._sleep(delay)
            self._last_dispatch = self._now()

    def _request_headers(self, url: str) -> Dict[str, str]:
        if httpx.URL(url).path.startswith(_SEARCH_PATH_PREFIX):
            return {}
        return {"Referer": self._base_url}

    async def fetch(self, url: str, params: Optional[Dict[str, str]] = None) -> str:
        """GET a page on the scraped host and return its body text.

        Raises BlockedError once 403 retries are exhausted and NetworkError for
        timeouts, connection failures and any other non-2xx status.
        """
        if not url.lower().startswith("https://"):
            raise ValueError("URL must be HTTPS")

        headers = self._request_headers(url)
        attempt = 0
        while True:
            await self._pace()
            _logger.debug("HTTP GET page", extra={"op": "fetch", "attempt": attempt + 1})
            try:
                resp = await self._client.get(url, params=params, headers=headers)
            except httpx.TimeoutException as e:
                raise NetworkError(
                    f"Request timed out after {self._timeout_seconds}s", url=url
                ) from e
            except httpx.HTTPError as e:
                raise NetworkError(f"Request failed: {e}", url=url) from e

            if resp.status_code == 403:
                if attempt < self._max_retries:
                    backoff = (attempt + 1) * self._backoff_step + self._draw(
                        0.0, self._backoff_jitter
                    )
                    _logger.warning(
                        "got 403, backing off before retry",
                        extra={
                            "op": "fetch",
                            "attempt": attempt + 1,
                            "max_retries": self._max_retries,
                            "backoff_seconds": round(backoff, 3),
                        },
                    )
                    await self._sleep(backoff)
                    attempt += 1
                    continue
                _logger.error(
                    "blocked after retries", extra={"op": "fetch", "attempts": attempt + 1}
                )
                raise BlockedError(
                    f"Access denied after {self._max_retries} retries. "
                    "The site may have temporarily blocked this IP address.",
                    attempts=attempt + 1,
                    url=url,
                )

            if not resp.is_success:
                raise NetworkError(
                    f"Unexpected HTTP status {resp.status_code}",
                    status_code=resp.status_code,
                    url=url,
                )
            return resp.text


__all__ = ["RateLimitedFetcher"]
