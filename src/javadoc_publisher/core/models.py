"""
Core data models for Javadoc Publisher.

Artifacts as reported by the registry, the version bucket used to partition
the published tree, and the per-run set of published artifacts.
"""

import re
from collections.abc import Iterator

from pydantic import BaseModel, Field

JAVADOC_EXTENSION = "-javadoc.jar"

_LEADING_SEGMENT = re.compile(r"([^.]+)\..*", re.DOTALL)


def version_bucket(version: str) -> str:
    """
    Return the major version line of a version string.

    ``2.5.0`` becomes ``2.x``; a version without a dot is returned unchanged.
    This is the only place a bucket is derived, so extraction paths, rosters
    and index pages always agree.
    """
    match = _LEADING_SEGMENT.fullmatch(version)
    return f"{match.group(1)}.x" if match else version


class Artifact(BaseModel):
    """An artifact search result from the registry."""

    group_id: str = Field(alias="g")
    artifact_id: str = Field(alias="a")
    latest_version: str = Field(alias="latestVersion")
    packaging: str | None = Field(default=None, alias="p")
    timestamp: int = 0
    extensions: frozenset[str] = Field(default_factory=frozenset, alias="ec")

    model_config = {"populate_by_name": True, "frozen": True, "extra": "ignore"}

    @classmethod
    def create(cls, group_id: str, artifact_id: str, latest_version: str) -> "Artifact":
        """Create an explicitly named artifact that is assumed to ship Javadoc."""
        return cls(
            group_id=group_id,
            artifact_id=artifact_id,
            latest_version=latest_version,
            extensions=frozenset({JAVADOC_EXTENSION}),
        )

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.group_id, self.artifact_id, self.latest_version)

    @property
    def has_javadoc(self) -> bool:
        return JAVADOC_EXTENSION in self.extensions

    @property
    def bucket(self) -> str:
        return version_bucket(self.latest_version)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Artifact):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __lt__(self, other: "Artifact") -> bool:
        if not isinstance(other, Artifact):
            return NotImplemented
        return self.key < other.key

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.latest_version}"


class PublishedSet:
    """
    Artifacts published during one run, grouped by version bucket.

    Buckets iterate in ascending key order and artifacts within a bucket
    are sorted by artifact id, so index generation never depends on the
    order the registry returned them in. Iterating the set itself yields
    artifacts in the order they were published.
    """

    def __init__(self) -> None:
        self._by_bucket: dict[str, set[Artifact]] = {}
        self._order: list[Artifact] = []

    def add(self, artifact: Artifact) -> None:
        """Record a published artifact under its bucket."""
        bucket = self._by_bucket.setdefault(artifact.bucket, set())
        if artifact in bucket:
            return
        bucket.add(artifact)
        self._order.append(artifact)

    def buckets(self) -> list[str]:
        return sorted(self._by_bucket)

    def artifacts(self, bucket: str) -> list[Artifact]:
        """Return the artifacts of a bucket ordered by artifact id."""
        return sorted(
            self._by_bucket.get(bucket, ()),
            key=lambda a: (a.artifact_id, a.group_id, a.latest_version),
        )

    def items(self) -> Iterator[tuple[str, list[Artifact]]]:
        for bucket in self.buckets():
            yield bucket, self.artifacts(bucket)

    def __iter__(self) -> Iterator[Artifact]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __bool__(self) -> bool:
        return bool(self._order)
