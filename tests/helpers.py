"""Shared test doubles and HTML fixture builders."""

from __future__ import annotations

import asyncio
import random
from html import escape

from mvn_repository_mcp.fetcher import RateLimitedFetcher

SITE = "https://mvnrepository.com"
REPO = "https://repo1.maven.org/maven2"


class FakeClock:
    """Monotonic clock that only moves when something sleeps on it."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


def make_fetcher(clock: FakeClock, **overrides) -> RateLimitedFetcher:
    kwargs = {
        "base_url": SITE,
        "sleep_fn": clock.sleep,
        "now_fn": clock,
        "rng": random.Random(1234),
    }
    kwargs.update(overrides)
    return RateLimitedFetcher(**kwargs)


def search_item(href: str, title: str, subtitle: str = "", usages: str = "") -> str:
    return f"""
    <div class="im">
      <div class="im-header">
        <h2 class="im-title"><a href="{href}">{title}</a></h2>
        <a class="im-usage" href="{href}/usages">{usages}</a>
      </div>
      <div class="im-subtitle">{subtitle}</div>
    </div>
    """


def search_page(*items: str) -> str:
    return f"<html><body><div id=\"maincontent\">{''.join(items)}</div></body></html>"


def version_row(version: str | None, date: str = "", vulns: str = "", href: str = "") -> str:
    if version is None:
        first = "<td>4.x</td>"
    else:
        first = f'<td><a class="vbtn release" href="{href}">{version}</a></td>'
    return f"<tr>{first}<td>{date}</td><td>{vulns}</td></tr>"


def versions_page(*rows: str) -> str:
    return (
        "<html><body>"
        '<table class="grid versions">'
        "<thead><tr><th>Version</th><th>Date</th><th>Vulnerabilities</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody>"
        "</table></body></html>"
    )


def snippet_page(**textareas: str) -> str:
    """Build a page with one textarea per `id=content` pair (escaped like the site)."""
    parts = []
    for element_id, content in textareas.items():
        parts.append(
            f'<div id="{element_id.replace("_", "-")}">'
            f'<textarea class="dependency">{escape(content)}</textarea></div>'
        )
    return f"<html><body>{''.join(parts)}</body></html>"
