from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
import respx

from mvn_repository_mcp.fetcher import RateLimitedFetcher
from mvn_repository_mcp.repository import MavenRepositoryClient
from mvn_repository_mcp.searcher import MavenRepositorySearcher
from tests.helpers import REPO, FakeClock, make_fetcher


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def fetcher(clock: FakeClock) -> AsyncIterator[RateLimitedFetcher]:
    f = make_fetcher(clock)
    yield f
    await f.aclose()


@pytest.fixture
async def searcher(clock: FakeClock) -> AsyncIterator[MavenRepositorySearcher]:
    s = MavenRepositorySearcher(
        fetcher=make_fetcher(clock),
        repository=MavenRepositoryClient(base_url=REPO),
    )
    yield s
    await s.aclose()


@pytest.fixture
def respx_router() -> Iterator[respx.Router]:
    with respx.mock(assert_all_called=False) as router:
        yield router
