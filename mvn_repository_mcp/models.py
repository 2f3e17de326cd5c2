"""Pydantic data model for scraped artifact data.

Every record is immutable and built fresh per request. Optional fields use
None for "absent" so that, e.g., an unknown vulnerability count is never
confused with zero.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

# Placeholder used when no version token can be parsed from display text.
LATEST_VERSION_SENTINEL = "latest"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Artifact(_Record):
    """A group/artifact pair as listed on a search or artifact page."""

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    version: str = Field(default=LATEST_VERSION_SENTINEL, min_length=1)
    description: Optional[str] = None
    url: Optional[str] = None
    usages: Optional[int] = Field(default=None, ge=0)
    last_updated: Optional[str] = None

    @field_validator("group_id", "artifact_id")
    @classmethod
    def _strip_and_validate(cls, v: str) -> str:
        v_stripped = v.strip()
        if not v_stripped:
            raise ValueError("must not be empty")
        return v_stripped

    @property
    def coordinate(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


class VersionEntry(_Record):
    """One row of an artifact's version table.

    `release_date` is free text as shown on the page. `vulnerabilities` is only
    set when the page reports a positive count.
    """

    version: str = Field(..., min_length=1)
    release_date: Optional[str] = None
    vulnerabilities: Optional[int] = Field(default=None, gt=0)
    url: Optional[str] = None


class VersionListing(_Record):
    """Versions of one artifact in the order the site presents them."""

    group_id: str
    artifact_id: str
    versions: tuple[VersionEntry, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_versions(self) -> int:
        return len(self.versions)


class SearchOutcome(_Record):
    """Artifacts matched by a free-text search, in page order."""

    query: str
    artifacts: tuple[Artifact, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_results(self) -> int:
        return len(self.artifacts)


class DependencySnippets(_Record):
    """Build-tool declarations for one group:artifact:version.

    `maven` and `gradle` are always populated; `sbt` and `ivy` are None when the
    page did not provide them.
    """

    maven: str = Field(..., min_length=1)
    gradle: str = Field(..., min_length=1)
    sbt: Optional[str] = None
    ivy: Optional[str] = None


__all__ = [
    "LATEST_VERSION_SENTINEL",
    "Artifact",
    "VersionEntry",
    "VersionListing",
    "SearchOutcome",
    "DependencySnippets",
]
