"""MCP server and tool definitions.

Design notes:
- Tools are thin wrappers; the *_text coroutines hold the rendering logic
  and stay callable without a transport.
- Expected failures (BlockedError, NetworkError, bad input) are rendered as
  an error message instead of failing the tool call.
- Logging goes to stderr via the central logging config.
"""

from __future__ import annotations

import logging
from typing import Literal, Optional

from fastmcp import FastMCP

from .config import Settings
from .errors import ScraperError
from .logging_config import configure_logging
from .models import DependencySnippets, SearchOutcome, VersionListing
from .searcher import DEFAULT_MAX_RESULTS, get_searcher

_logger = logging.getLogger(__name__)

SERVER_NAME = "mvn-repository-mcp-server"

_server = FastMCP(SERVER_NAME)


def render_search_outcome(outcome: SearchOutcome) -> str:
    lines = []
    for artifact in outcome.artifacts:
        line = artifact.coordinate
        if artifact.description:
            line += f" - {artifact.description}"
        lines.append(line)
    return (
        f'Found {outcome.total_results} artifacts for query "{outcome.query}":\n\n'
        + "\n".join(lines)
    )


def render_version_listing(listing: VersionListing) -> str:
    lines = []
    for entry in listing.versions:
        line = entry.version
        if entry.release_date:
            line += f" ({entry.release_date})"
        if entry.vulnerabilities:
            line += f" - {entry.vulnerabilities} vulnerabilities"
        lines.append(line)
    return (
        f"Found {listing.total_versions} versions for "
        f"{listing.group_id}:{listing.artifact_id}:\n\n" + "\n".join(lines)
    )


def render_pom(coordinate: str, pom: str) -> str:
    return f"POM.xml for {coordinate}:\n\n```xml\n{pom}\n```"


def render_snippets(coordinate: str, snippets: DependencySnippets) -> str:
    blocks = [
        f"Dependency snippets for {coordinate}:",
        f"**Maven:**\n```xml\n{snippets.maven}\n```",
        f"**Gradle:**\n```gradle\n{snippets.gradle}\n```",
    ]
    if snippets.sbt:
        blocks.append(f"**SBT:**\n```scala\n{snippets.sbt}\n```")
    if snippets.ivy:
        blocks.append(f"**Ivy:**\n```xml\n{snippets.ivy}\n```")
    return "\n\n".join(blocks)


def _error_text(action: str, exc: Exception) -> str:
    _logger.warning("tool failed", extra={"op": action, "error": str(exc)})
    return f"Error {action}: {exc}"


async def search_maven_artifacts_text(query: str, max_results: int = DEFAULT_MAX_RESULTS) -> str:
    try:
        outcome = await get_searcher().search_artifacts(query, max_results)
    except (ScraperError, ValueError) as e:
        return _error_text("searching for Maven artifacts", e)
    return render_search_outcome(outcome)


async def get_artifact_versions_text(group_id: str, artifact_id: str) -> str:
    try:
        listing = await get_searcher().get_artifact_versions(group_id, artifact_id)
    except (ScraperError, ValueError) as e:
        return _error_text(f"fetching versions for {group_id}:{artifact_id}", e)
    return render_version_listing(listing)


async def get_pom_xml_text(group_id: str, artifact_id: str, version: str) -> str:
    coordinate = f"{group_id}:{artifact_id}:{version}"
    try:
        pom = await get_searcher().get_pom_xml(group_id, artifact_id, version)
    except (ScraperError, ValueError) as e:
        return _error_text(f"fetching POM for {coordinate}", e)
    return render_pom(coordinate, pom)


async def get_dependency_snippets_text(group_id: str, artifact_id: str, version: str) -> str:
    coordinate = f"{group_id}:{artifact_id}:{version}"
    try:
        snippets = await get_searcher().get_dependency_snippets(group_id, artifact_id, version)
    except (ScraperError, ValueError) as e:
        return _error_text(f"fetching dependency snippets for {coordinate}", e)
    return render_snippets(coordinate, snippets)


@_server.tool()
async def search_maven_artifacts(query: str, max_results: int = DEFAULT_MAX_RESULTS) -> str:
    """Search for Maven artifacts on mvnrepository.com."""
    return await search_maven_artifacts_text(query, max_results)


@_server.tool()
async def get_artifact_versions(group_id: str, artifact_id: str) -> str:
    """Get all available versions of a Maven artifact (e.g. org.springframework:spring-core)."""
    return await get_artifact_versions_text(group_id, artifact_id)


@_server.tool()
async def get_pom_xml(group_id: str, artifact_id: str, version: str) -> str:
    """Fetch the pom.xml file for a specific artifact version."""
    return await get_pom_xml_text(group_id, artifact_id, version)


@_server.tool()
async def get_dependency_snippets(group_id: str, artifact_id: str, version: str) -> str:
    """Get Maven, Gradle and other build tool dependency snippets for an artifact."""
    return await get_dependency_snippets_text(group_id, artifact_id, version)


def run(
    transport: Optional[Literal["stdio", "http"]] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
) -> None:  # pragma: no cover
    s = Settings()
    configure_logging(s.LOG_LEVEL, s.LOG_JSON)
    transport = transport or s.TRANSPORT
    if transport == "http":
        host = host or s.HTTP_HOST
        port = port or s.HTTP_PORT
        _logger.info("starting server", extra={"transport": transport, "host": host, "port": port})
        _server.run(transport="http", host=host, port=port)
    else:
        _logger.info("starting server", extra={"transport": "stdio"})
        _server.run(transport="stdio")


__all__ = [
    "SERVER_NAME",
    "render_search_outcome",
    "render_version_listing",
    "render_pom",
    "render_snippets",
    "search_maven_artifacts_text",
    "get_artifact_versions_text",
    "get_pom_xml_text",
    "get_dependency_snippets_text",
    "run",
]
