"""
Index Builder - per-bucket listing pages of published artifacts.

Each bucket keeps a roster (``artifacts.json``) of every artifact ever
published into it. A rebuild merges the run's artifacts into the roster and
regenerates ``index.html`` from the complete roster, so artifacts that were
not republished this run stay listed.

Layout under the publish root::

    <root>/<bucket>/index.html
    <root>/<bucket>/artifacts.json
    <root>/<bucket>/<artifactId>/version.txt
"""

import html
import logging
from datetime import datetime, timezone
from pathlib import Path, PurePath
from urllib.parse import quote

from pydantic import BaseModel, Field

from javadoc_publisher.core.exceptions import ExtractionError
from javadoc_publisher.core.models import PublishedSet
from javadoc_publisher.publish.decision import read_marker

logger = logging.getLogger(__name__)

INDEX_NAME = "index.html"
ROSTER_NAME = "artifacts.json"


def is_path_segment(name: str) -> bool:
    """True if name is one plain path component: no separators, not . or .."""
    if name in ("", ".", ".."):
        return False
    if "/" in name or "\\" in name:
        return False
    return PurePath(name).name == name


class BucketRoster(BaseModel):
    """Every artifact published into one bucket, with its last version."""

    bucket: str
    group_id: str | None = None
    artifacts: dict[str, str] = Field(
        default_factory=dict, description="artifact_id -> published version"
    )
    updated_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


class IndexBuilder:
    """Owns the mapping from (bucket, artifact id) to paths under the root."""

    def __init__(self, root: Path):
        self.root = root

    def bucket_dir(self, bucket: str) -> Path:
        return self.root / bucket

    def artifact_dir(self, bucket: str, artifact_id: str) -> Path:
        return self.root / bucket / artifact_id

    def index_path(self, bucket: str) -> Path:
        return self.root / bucket / INDEX_NAME

    def roster_path(self, bucket: str) -> Path:
        return self.root / bucket / ROSTER_NAME

    def load_roster(self, bucket: str) -> BucketRoster:
        """
        Load a bucket's roster.

        Buckets published before rosters existed have none; their roster is
        rebuilt from the version markers of the bucket's artifact
        directories.
        """
        path = self.roster_path(bucket)
        if path.is_file():
            try:
                return BucketRoster.model_validate_json(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning(f"Ignoring unreadable roster {path}, rebuilding from markers: {e}")
        return self._roster_from_markers(bucket)

    def _roster_from_markers(self, bucket: str) -> BucketRoster:
        roster = BucketRoster(bucket=bucket)
        bucket_dir = self.bucket_dir(bucket)
        if not bucket_dir.is_dir():
            return roster
        for child in sorted(bucket_dir.iterdir()):
            if not child.is_dir():
                continue
            version = read_marker(child)
            if version is not None:
                roster.artifacts[child.name] = version
        if roster.artifacts:
            logger.debug(f"Seeded roster of {bucket} with {len(roster.artifacts)} artifacts")
        return roster

    def rebuild(self, group_id: str, published: PublishedSet) -> list[Path]:
        """
        Regenerate the index of every bucket that received artifacts.

        Args:
            group_id: Group shown as the page title
            published: Artifacts published in this run

        Returns:
            Paths of the roster and index files written, for staging
        """
        written: list[Path] = []
        for bucket, artifacts in published.items():
            roster = self.load_roster(bucket)
            roster.group_id = group_id
            for artifact in artifacts:
                roster.artifacts[artifact.artifact_id] = artifact.latest_version
            roster.updated_at = datetime.now(timezone.utc).isoformat()

            roster_path = self.roster_path(bucket)
            index_path = self.index_path(bucket)
            try:
                self.bucket_dir(bucket).mkdir(parents=True, exist_ok=True)
                roster_path.write_text(roster.model_dump_json(indent=2) + "\n", encoding="utf-8")
                index_path.write_text(render_index(group_id, roster), encoding="utf-8")
            except OSError as e:
                raise ExtractionError(
                    f"Failed to write index of bucket {bucket}: {e}",
                    destination=str(self.bucket_dir(bucket)),
                    details={"path": str(e.filename or index_path)},
                ) from e

            logger.info(f"Wrote {index_path} listing {len(roster.artifacts)} artifacts")
            written.extend([roster_path, index_path])
        return written


def render_index(group_id: str, roster: BucketRoster) -> str:
    """Render the listing page of a bucket, artifacts sorted by id."""
    title = html.escape(group_id)
    lines = [
        "<!DOCTYPE html>",
        f"<html><head><title>{title}</title></head>",
        "<body>",
        f"<h1>{title}</h1>",
        "<ul>",
    ]
    for artifact_id in sorted(roster.artifacts):
        href = html.escape(quote(artifact_id) + "/")
        lines.append(f'<li><a href="{href}">{html.escape(artifact_id)}</a></li>')
    lines.extend(["</ul>", "</body>", "</html>"])
    return "\n".join(lines) + "\n"
