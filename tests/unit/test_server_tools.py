from typing import Any

import pytest

from mvn_repository_mcp import server as server_module
from mvn_repository_mcp.errors import BlockedError, NetworkError
from mvn_repository_mcp.models import (
    Artifact,
    DependencySnippets,
    SearchOutcome,
    VersionEntry,
    VersionListing,
)


class StubSearcher:
    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple] = []

    async def _answer(self, *args: Any) -> Any:
        self.calls.append(args)
        if self.error is not None:
            raise self.error
        return self.result

    search_artifacts = get_artifact_versions = get_pom_xml = get_dependency_snippets = _answer


@pytest.fixture
def use_searcher(monkeypatch: pytest.MonkeyPatch):
    def _install(stub: StubSearcher) -> StubSearcher:
        monkeypatch.setattr(server_module, "get_searcher", lambda: stub)
        return stub

    return _install


def test_render_search_outcome() -> None:
    outcome = SearchOutcome(
        query="json",
        artifacts=(
            Artifact(group_id="com.fasterxml.jackson.core", artifact_id="jackson-databind",
                     version="2.17.0", description="General data-binding"),
            Artifact(group_id="org.json", artifact_id="json"),
        ),
    )
    assert server_module.render_search_outcome(outcome) == (
        'Found 2 artifacts for query "json":\n\n'
        "com.fasterxml.jackson.core:jackson-databind:2.17.0 - General data-binding\n"
        "org.json:json:latest"
    )


def test_render_version_listing() -> None:
    listing = VersionListing(
        group_id="g",
        artifact_id="a",
        versions=(
            VersionEntry(version="2.0", release_date="Jan 2024", vulnerabilities=2),
            VersionEntry(version="1.0"),
        ),
    )
    assert server_module.render_version_listing(listing) == (
        "Found 2 versions for g:a:\n\n2.0 (Jan 2024) - 2 vulnerabilities\n1.0"
    )


def test_render_snippets_omits_absent_tools() -> None:
    text = server_module.render_snippets(
        "g:a:1", DependencySnippets(maven="<dependency/>", gradle="implementation 'g:a:1'")
    )
    assert text.startswith("Dependency snippets for g:a:1:")
    assert "**Maven:**\n```xml\n<dependency/>\n```" in text
    assert "**Gradle:**" in text
    assert "**SBT:**" not in text
    assert "**Ivy:**" not in text


def test_render_snippets_includes_sbt_when_present() -> None:
    text = server_module.render_snippets(
        "g:a:1", DependencySnippets(maven="m", gradle="g", sbt='"g" % "a" % "1"')
    )
    assert text.endswith('**SBT:**\n```scala\n"g" % "a" % "1"\n```')


@pytest.mark.asyncio
async def test_search_tool_renders_results(use_searcher) -> None:
    stub = use_searcher(StubSearcher(SearchOutcome(query="q", artifacts=())))
    text = await server_module.search_maven_artifacts_text("q", 5)
    assert text.startswith('Found 0 artifacts for query "q"')
    assert stub.calls == [("q", 5)]


@pytest.mark.asyncio
async def test_blocked_error_becomes_message(use_searcher) -> None:
    use_searcher(StubSearcher(error=BlockedError("Access denied after 3 retries.", attempts=4)))
    text = await server_module.search_maven_artifacts_text("q")
    assert text == "Error searching for Maven artifacts: Access denied after 3 retries."


@pytest.mark.asyncio
async def test_versions_network_error_becomes_message(use_searcher) -> None:
    use_searcher(StubSearcher(error=NetworkError("Unexpected HTTP status 404", status_code=404)))
    text = await server_module.get_artifact_versions_text("g", "a")
    assert text == "Error fetching versions for g:a: Unexpected HTTP status 404"


@pytest.mark.asyncio
async def test_pom_tool_wraps_xml(use_searcher) -> None:
    use_searcher(StubSearcher("<project/>"))
    text = await server_module.get_pom_xml_text("g", "a", "1")
    assert text == "POM.xml for g:a:1:\n\n```xml\n<project/>\n```"


@pytest.mark.asyncio
async def test_invalid_input_becomes_message(use_searcher) -> None:
    use_searcher(StubSearcher(error=ValueError("group_id must be non-empty")))
    text = await server_module.get_dependency_snippets_text("", "a", "1")
    assert text == "Error fetching dependency snippets for :a:1: group_id must be non-empty"
