"""Errors propagated by the scraping client.

Only fetch-level failures surface as exceptions. Extraction shortfalls degrade
to omitted fields or fallback values and are never raised.
"""

from __future__ import annotations

from typing import Optional


class ScraperError(Exception):
    """Base class for failures talking to mvnrepository.com or Maven Central."""


class BlockedError(ScraperError):
    """The scraped host kept answering 403 after every retry.

    Treat as transient: back off and try again later.
    """

    def __init__(self, message: str, *, attempts: int, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.url = url


class NetworkError(ScraperError):
    """Timeout, connection failure, or an unexpected HTTP status.

    `status_code` is None when no response was received at all.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


__all__ = ["ScraperError", "BlockedError", "NetworkError"]
