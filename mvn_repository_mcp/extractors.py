"""HTML extraction for mvnrepository.com pages.

Each extractor is a pure function of the page markup. Missing or odd markup
never raises: search results and version rows that cannot be read are
skipped, and the Maven/Gradle snippets fall back to text built from the
coordinate.

CSS selectors are kept as data (the *Selectors dataclasses and
SNIPPET_SELECTORS) so they can be swapped for synthetic fixtures or updated
when the site changes its layout.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Mapping, Optional, Union
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag

from .models import (
    LATEST_VERSION_SENTINEL,
    Artifact,
    DependencySnippets,
    VersionEntry,
)

Document = Union[str, BeautifulSoup]

_HTML_PARSER: Final[str] = "html.parser"

# First run of digits(.digits)* with optional [.-]qualifier parts, e.g. 2.17.0-rc1
_VERSION_TOKEN: Final[re.Pattern[str]] = re.compile(r"(\d+(?:\.\d+)*(?:[.-][A-Za-z0-9]+)*)")
# Grouped thousands, e.g. 1,234
_GROUPED_NUMBER: Final[re.Pattern[str]] = re.compile(r"(\d{1,3}(?:,\d{3})*)")
_FIRST_INTEGER: Final[re.Pattern[str]] = re.compile(r"(\d+)")

_ARTIFACT_PATH_SEGMENT: Final[str] = "artifact"
_NO_VULNERABILITIES: Final[str] = "-"

MAVEN_TEMPLATE: Final[str] = (
    "<dependency>\n"
    "    <groupId>{group_id}</groupId>\n"
    "    <artifactId>{artifact_id}</artifactId>\n"
    "    <version>{version}</version>\n"
    "</dependency>"
)
GRADLE_TEMPLATE: Final[str] = "implementation '{group_id}:{artifact_id}:{version}'"


@dataclass(frozen=True)
class SearchSelectors:
    item: str = ".im"
    title_link: str = ".im-title a"
    subtitle: str = ".im-subtitle"
    usages: str = ".im-usage"


@dataclass(frozen=True)
class VersionSelectors:
    row: str = ".grid.versions tbody tr"
    version_link: str = "td:nth-child(1) a"
    release_date: str = "td:nth-child(2)"
    vulnerabilities: str = "td:nth-child(3)"


# Tried in order per build tool; the first non-empty textarea wins.
SNIPPET_SELECTORS: Final[Mapping[str, tuple[str, ...]]] = {
    "maven": ("#maven-a textarea", ".maven textarea", 'textarea[id*="maven"]'),
    "gradle": ("#gradle-a textarea", ".gradle textarea", 'textarea[id*="gradle"]'),
    "sbt": ("#sbt-a textarea", ".sbt textarea", 'textarea[id*="sbt"]'),
}

SEARCH_SELECTORS: Final[SearchSelectors] = SearchSelectors()
VERSION_SELECTORS: Final[VersionSelectors] = VersionSelectors()


def parse_html(document: Document) -> BeautifulSoup:
    """Return a parsed document, parsing raw markup if needed."""
    if isinstance(document, BeautifulSoup):
        return document
    return BeautifulSoup(document or "", _HTML_PARSER)


def _text(elem: Optional[Tag]) -> str:
    if elem is None:
        return ""
    return elem.get_text().strip()


def _href(elem: Tag) -> Optional[str]:
    href = elem.get("href")
    if isinstance(href, list):  # multi-valued attributes come back as lists
        href = " ".join(href)
    href = (href or "").strip()
    return href or None


def parse_artifact_path(href: str) -> Optional[tuple[str, str]]:
    """Return (group_id, artifact_id) for `/artifact/{group}/{artifact}[/...]`."""
    parts = urlsplit(href).path.split("/")
    if len(parts) < 4 or parts[1] != _ARTIFACT_PATH_SEGMENT:
        return None
    group_id, artifact_id = parts[2].strip(), parts[3].strip()
    if not group_id or not artifact_id:
        return None
    return group_id, artifact_id


def parse_version_token(title: str) -> str:
    match = _VERSION_TOKEN.search(title)
    return match.group(1) if match else LATEST_VERSION_SENTINEL


def parse_usages(text: str) -> int:
    match = _GROUPED_NUMBER.search(text)
    if match is None:
        return 0
    return int(match.group(1).replace(",", ""))


def parse_vulnerabilities(text: str) -> Optional[int]:
    """Positive vulnerability count, or None for '-', empty or zero."""
    text = text.strip()
    if not text or text == _NO_VULNERABILITIES:
        return None
    match = _FIRST_INTEGER.search(text)
    if match is None:
        return None
    count = int(match.group(1))
    return count if count > 0 else None


def extract_search_results(
    document: Document,
    *,
    base_url: str,
    max_results: int,
    selectors: SearchSelectors = SEARCH_SELECTORS,
) -> list[Artifact]:
    """Read artifacts from a search result page, stopping at `max_results`."""
    soup = parse_html(document)
    artifacts: list[Artifact] = []
    if max_results <= 0:
        return artifacts
    site_host = urlsplit(base_url).netloc.lower()

    for item in soup.select(selectors.item):
        link = item.select_one(selectors.title_link)
        if link is None:
            continue
        href = _href(link)
        title = _text(link)
        if not href or not title:
            continue
        # Absolute links must point back at the site itself.
        link_host = urlsplit(href).netloc.lower()
        if link_host and link_host != site_host:
            continue
        coordinate = parse_artifact_path(href)
        if coordinate is None:
            continue
        group_id, artifact_id = coordinate

        artifacts.append(
            Artifact(
                group_id=group_id,
                artifact_id=artifact_id,
                version=parse_version_token(title),
                description=_text(item.select_one(selectors.subtitle)) or None,
                url=urljoin(base_url, href),
                usages=parse_usages(_text(item.select_one(selectors.usages))),
            )
        )
        if len(artifacts) >= max_results:
            break
    return artifacts


def extract_versions(
    document: Document,
    *,
    page_url: str,
    selectors: VersionSelectors = VERSION_SELECTORS,
) -> list[VersionEntry]:
    """Read the version table of an artifact page in page order.

    Relative links are resolved against `page_url`. Rows without a version
    link are skipped.
    """
    soup = parse_html(document)
    entries: list[VersionEntry] = []
    for row in soup.select(selectors.row):
        link = row.select_one(selectors.version_link)
        if link is None:
            continue
        version = _text(link)
        if not version:
            continue
        href = _href(link)
        entries.append(
            VersionEntry(
                version=version,
                release_date=_text(row.select_one(selectors.release_date)) or None,
                vulnerabilities=parse_vulnerabilities(
                    _text(row.select_one(selectors.vulnerabilities))
                ),
                url=urljoin(page_url, href) if href else None,
            )
        )
    return entries


def _first_snippet(soup: BeautifulSoup, patterns: tuple[str, ...]) -> Optional[str]:
    for pattern in patterns:
        for elem in soup.select(pattern):
            text = _text(elem)
            if text:
                return text
    return None


def extract_dependency_snippets(
    document: Document,
    *,
    group_id: str,
    artifact_id: str,
    version: str,
    selectors: Mapping[str, tuple[str, ...]] = SNIPPET_SELECTORS,
) -> DependencySnippets:
    """Read build-tool snippets from an artifact version page.

    Maven and Gradle fall back to the fixed templates; sbt is left as None
    when the page does not provide it.
    """
    soup = parse_html(document)
    coords = {"group_id": group_id, "artifact_id": artifact_id, "version": version}

    maven = _first_snippet(soup, selectors.get("maven", ()))
    gradle = _first_snippet(soup, selectors.get("gradle", ()))
    sbt = _first_snippet(soup, selectors.get("sbt", ()))

    return DependencySnippets(
        maven=maven or MAVEN_TEMPLATE.format(**coords),
        gradle=gradle or GRADLE_TEMPLATE.format(**coords),
        sbt=sbt,
    )


__all__ = [
    "SearchSelectors",
    "VersionSelectors",
    "SEARCH_SELECTORS",
    "VERSION_SELECTORS",
    "SNIPPET_SELECTORS",
    "MAVEN_TEMPLATE",
    "GRADLE_TEMPLATE",
    "parse_html",
    "parse_artifact_path",
    "parse_version_token",
    "parse_usages",
    "parse_vulnerabilities",
    "extract_search_results",
    "extract_versions",
    "extract_dependency_snippets",
]
