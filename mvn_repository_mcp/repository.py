"""Direct client for the Maven Central artifact repository.

repo1.maven.org has no anti-bot layer, so requests here skip pacing and
retries entirely: one attempt, a short fixed timeout, a plain User-Agent.
"""

from __future__ import annotations

import logging
from typing import Final, Optional

import httpx

from .config import Settings
from .errors import NetworkError

_logger = logging.getLogger(__name__)

_POM_SUFFIX: Final[str] = ".pom"


def validate_coordinate_part(name: str, value: str) -> str:
    """Return `value` stripped, rejecting empty or path-like input."""
    v = (value or "").strip()
    if not v:
        raise ValueError(f"{name} must be non-empty")
    if v.startswith("/") or ".." in v or "/" in v or "\\" in v:
        raise ValueError(f"{name} contains illegal path characters")
    return v


def group_path(group_id: str) -> str:
    if group_id.startswith(".") or group_id.endswith(".") or ".." in group_id:
        raise ValueError("group_id contains illegal path characters")
    return group_id.replace(".", "/")


def build_pom_url(base_url: str, group_id: str, artifact_id: str, version: str) -> str:
    """`{base}/{group/as/path}/{artifact}/{version}/{artifact}-{version}.pom`"""
    g = validate_coordinate_part("group_id", group_id)
    a = validate_coordinate_part("artifact_id", artifact_id)
    v = validate_coordinate_part("version", version)
    return f"{base_url.rstrip('/')}/{group_path(g)}/{a}/{v}/{a}-{v}{_POM_SUFFIX}"


class MavenRepositoryClient:
    """Unthrottled fetches of raw POM files."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout_seconds: Optional[int] = None,
        max_pom_bytes: Optional[int] = None,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        s = Settings()
        self._base_url = base_url or s.MAVEN_REPO_BASE_URL
        if not self._base_url.lower().startswith("https://"):
            raise ValueError("Base URL must be HTTPS")
        self._timeout_seconds = int(
            timeout_seconds if timeout_seconds is not None else s.REPO_TIMEOUT_SECONDS
        )
        if self._timeout_seconds < 1:
            raise ValueError("timeout_seconds must be >= 1")
        self._max_pom_bytes = int(max_pom_bytes if max_pom_bytes is not None else s.MAX_POM_BYTES)
        if self._max_pom_bytes < 1:
            raise ValueError("max_pom_bytes must be >= 1")
        self._client = client or httpx.AsyncClient(
            timeout=self._timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": user_agent or s.USER_AGENT},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def pom_url(self, group_id: str, artifact_id: str, version: str) -> str:
        return build_pom_url(self._base_url, group_id, artifact_id, version)

    async def get_pom(self, group_id: str, artifact_id: str, version: str) -> str:
        """Download a POM and return it verbatim as UTF-8 text.

        Raises NetworkError on timeouts, transport failures, non-2xx responses
        and bodies larger than the configured cap. No retries.
        """
        url = self.pom_url(group_id, artifact_id, version)
        _logger.debug("HTTP GET pom", extra={"op": "get_pom"})

        # Streamed so the size cap is enforced before the whole body is buffered.
        try:
            async with self._client.stream("GET", url) as resp:
                if not resp.is_success:
                    raise NetworkError(
                        f"Unexpected HTTP status {resp.status_code}",
                        status_code=resp.status_code,
                        url=url,
                    )
                total = 0
                chunks: list[bytes] = []
                async for chunk in resp.aiter_bytes():
                    total += len(chunk)
                    if total > self._max_pom_bytes:
                        raise NetworkError("POM exceeds maximum allowed size", url=url)
                    chunks.append(chunk)
        except httpx.TimeoutException as e:
            raise NetworkError(
                f"Request timed out after {self._timeout_seconds}s", url=url
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Request failed: {e}", url=url) from e

        return b"".join(chunks).decode("utf-8", errors="replace")


__all__ = [
    "MavenRepositoryClient",
    "build_pom_url",
    "group_path",
    "validate_coordinate_part",
]
