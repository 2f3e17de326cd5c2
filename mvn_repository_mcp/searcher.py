"""Public operations over mvnrepository.com and Maven Central.

Each operation fetches one page (paced, via RateLimitedFetcher) or one POM
(direct, via MavenRepositoryClient) and hands the body to an extractor.
Fetch failures propagate as BlockedError/NetworkError; extraction shortfalls
only ever shrink the result.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

from .config import Settings
from .extractors import (
    extract_dependency_snippets,
    extract_search_results,
    extract_versions,
)
from .fetcher import RateLimitedFetcher
from .models import Artifact, DependencySnippets, SearchOutcome, VersionListing
from .repository import MavenRepositoryClient, validate_coordinate_part

_logger = logging.getLogger(__name__)

_MAX_QUERY_LEN = 1000
DEFAULT_MAX_RESULTS = 10


def _validate_query(query: str) -> str:
    if not isinstance(query, str):
        raise ValueError("query must be a string")
    q = query.strip()
    if not q:
        raise ValueError("query must be non-empty")
    if len(q) > _MAX_QUERY_LEN:
        raise ValueError(f"query exceeds maximum length {_MAX_QUERY_LEN}")
    return q


class MavenRepositorySearcher:
    """Search, version listing, POM and snippet lookups for Maven artifacts.

    Collaborators are created from Settings unless injected.
    """

    def __init__(
        self,
        *,
        fetcher: RateLimitedFetcher | None = None,
        repository: MavenRepositoryClient | None = None,
        max_results_limit: Optional[int] = None,
    ) -> None:
        self._max_results_limit = int(
            max_results_limit if max_results_limit is not None else Settings().MAX_RESULTS_LIMIT
        )
        if self._max_results_limit < 1:
            raise ValueError("max_results_limit must be >= 1")
        self._fetcher = fetcher or RateLimitedFetcher()
        self._repository = repository or MavenRepositoryClient()

    async def aclose(self) -> None:
        await self._fetcher.aclose()
        await self._repository.aclose()

    def _artifact_url(self, *segments: str) -> str:
        path = "/".join(quote(s, safe="") for s in segments)
        return f"{self._fetcher.base_url}/artifact/{path}"

    async def search_artifacts(
        self, query: str, max_results: int = DEFAULT_MAX_RESULTS
    ) -> SearchOutcome:
        q = _validate_query(query)
        limit = min(max(int(max_results), 0), self._max_results_limit)
        _logger.info("searching artifacts", extra={"op": "search", "max_results": limit})

        html = await self._fetcher.fetch(f"{self._fetcher.base_url}/search", params={"q": q})
        artifacts = extract_search_results(
            html, base_url=self._fetcher.base_url, max_results=limit
        )
        return SearchOutcome(query=query, artifacts=tuple(artifacts))

    async def get_artifact_versions(self, group_id: str, artifact_id: str) -> VersionListing:
        g = validate_coordinate_part("group_id", group_id)
        a = validate_coordinate_part("artifact_id", artifact_id)
        _logger.info("fetching versions", extra={"op": "versions", "group_id": g, "artifact_id": a})

        page_url = self._artifact_url(g, a)
        html = await self._fetcher.fetch(page_url)
        entries = extract_versions(html, page_url=page_url)
        return VersionListing(group_id=g, artifact_id=a, versions=tuple(entries))

    async def get_pom_xml(self, group_id: str, artifact_id: str, version: str) -> str:
        _logger.info(
            "fetching POM",
            extra={"op": "pom", "group_id": group_id, "artifact_id": artifact_id},
        )
        return await self._repository.get_pom(group_id, artifact_id, version)

    async def get_dependency_snippets(
        self, group_id: str, artifact_id: str, version: str
    ) -> DependencySnippets:
        g = validate_coordinate_part("group_id", group_id)
        a = validate_coordinate_part("artifact_id", artifact_id)
        v = validate_coordinate_part("version", version)
        _logger.info("fetching dependency snippets", extra={"op": "snippets", "group_id": g})

        html = await self._fetcher.fetch(self._artifact_url(g, a, v))
        return extract_dependency_snippets(html, group_id=g, artifact_id=a, version=v)

    async def get_artifact_details(self, group_id: str, artifact_id: str) -> Optional[Artifact]:
        """Summarize an artifact from the first row of its version table.

        The first row is whatever the site lists first (usually the newest
        release); no version ordering is applied. Returns None when the page
        lists no versions.
        """
        listing = await self.get_artifact_versions(group_id, artifact_id)
        if not listing.versions:
            return None
        first = listing.versions[0]
        return Artifact(
            group_id=listing.group_id,
            artifact_id=listing.artifact_id,
            version=first.version,
            url=first.url,
            last_updated=first.release_date,
        )


# Simple module-level singleton for convenience
_singleton: MavenRepositorySearcher | None = None


def get_searcher() -> MavenRepositorySearcher:
    global _singleton
    if _singleton is None:
        _singleton = MavenRepositorySearcher()
    return _singleton


async def close_searcher() -> None:
    global _singleton
    if _singleton is not None:
        await _singleton.aclose()
        _singleton = None


__all__ = [
    "DEFAULT_MAX_RESULTS",
    "MavenRepositorySearcher",
    "get_searcher",
    "close_searcher",
]
