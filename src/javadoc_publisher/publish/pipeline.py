"""
Publish Pipeline - download, extract and push Javadoc for a group.

Runs linearly in one thread:

    sync working copy
    for each artifact: decide -> (skip | fetch -> extract -> mark -> stage)
    rebuild bucket indexes
    commit and push once, if anything was published

Any fetch, extraction or sync failure aborts the run. Markers make a rerun
pick up where the failed run stopped.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Protocol

from javadoc_publisher.config import PublisherConfig
from javadoc_publisher.core.exceptions import FetchError, UsageError
from javadoc_publisher.core.models import Artifact, PublishedSet
from javadoc_publisher.process.executor import ProcessExecutor
from javadoc_publisher.publish.decision import should_publish, write_marker
from javadoc_publisher.publish.extractor import extract_archive
from javadoc_publisher.publish.index import IndexBuilder, is_path_segment
from javadoc_publisher.publish.repository import RepositorySync

logger = logging.getLogger(__name__)

COMMIT_TITLE = "Publish Javadoc"


class ArtifactRegistry(Protocol):
    """What the pipeline needs from a registry client."""

    def latest_artifacts(self, group_id: str) -> list[Artifact]: ...

    def download_javadoc(self, artifact: Artifact) -> BinaryIO: ...


@dataclass
class PublishResult:
    """Outcome of one pipeline run."""

    group_id: str
    remote_url: str
    published: list[Artifact] = field(default_factory=list)
    skipped: list[Artifact] = field(default_factory=list)
    commit_message: str | None = None
    dry_run: bool = False

    @property
    def published_count(self) -> int:
        return len(self.published)


def commit_message(artifacts: list[Artifact]) -> str:
    """Title, blank line, then one ``group:artifact:version`` line per artifact."""
    return "\n".join([COMMIT_TITLE, "", *(str(a) for a in artifacts)])


def unsafe_coordinate(artifact: Artifact) -> tuple[str, str] | None:
    """Return the (name, value) of a coordinate that is not a plain path segment."""
    for name, value in (("bucket", artifact.bucket), ("artifact_id", artifact.artifact_id)):
        if not is_path_segment(value):
            return name, value
    return None


class PublishPipeline:
    """
    Publishes Javadoc archives into a git working copy.

    The working copy directory is also the publish root; nothing guards
    against two pipelines sharing it concurrently.
    """

    def __init__(
        self,
        registry: ArtifactRegistry,
        sync: RepositorySync,
        index_builder: IndexBuilder | None = None,
        force: bool = False,
    ):
        self._registry = registry
        self._sync = sync
        self._index = index_builder or IndexBuilder(sync.directory)
        self.force = force

    @classmethod
    def from_config(
        cls,
        directory: Path,
        registry: ArtifactRegistry,
        config: PublisherConfig | None = None,
        executor: ProcessExecutor | None = None,
    ) -> "PublishPipeline":
        """Wire a pipeline from configuration."""
        config = config or PublisherConfig()
        executor = executor or ProcessExecutor(
            read_timeout=config.read_timeout_seconds,
            deadline=config.deadline_seconds,
            terminate_timeout=config.terminate_timeout_seconds,
        )
        sync = RepositorySync(
            directory,
            executor=executor,
            branch=config.branch,
            remote=config.remote,
            dry_run=config.dry_run,
        )
        return cls(registry, sync, force=config.force)

    def publish_latest(self, group_id: str, remote_url: str) -> PublishResult:
        """Publish the latest version of every artifact in a group."""
        artifacts = self._registry.latest_artifacts(group_id)
        logger.info(f"Maven Central returned {len(artifacts)} artifacts")
        return self.run(group_id, remote_url, artifacts)

    def publish(
        self, group_id: str, remote_url: str, artifact_id: str, version: str
    ) -> PublishResult:
        """Publish one explicitly named artifact version."""
        artifact = Artifact.create(group_id, artifact_id, version)
        unsafe = unsafe_coordinate(artifact)
        if unsafe:
            name, value = unsafe
            raise UsageError(
                f"{artifact} cannot be published: {name} {value!r} is not a plain directory name",
                argument="version" if name == "bucket" else "artifact_id",
            )
        return self.run(group_id, remote_url, [artifact])

    def run(
        self, group_id: str, remote_url: str, artifacts: list[Artifact]
    ) -> PublishResult:
        """
        Publish artifacts in order and push the result in one commit.

        Returns:
            PublishResult; published_count is 0 when everything was current

        Raises:
            FetchError: If an archive cannot be downloaded, or an artifact
                would be written outside the working copy
            ExtractionError: If an archive cannot be extracted, or its marker or
                a bucket index cannot be written
            SyncError: If a git operation fails
        """
        for artifact in artifacts:
            # artifacts without Javadoc are never written to disk
            unsafe = unsafe_coordinate(artifact) if artifact.has_javadoc else None
            if unsafe:
                name, value = unsafe
                raise FetchError(
                    f"Registry returned {artifact} whose {name} {value!r} is not a plain directory name",
                    details={name: value},
                )

        self._sync.ensure_up_to_date(remote_url)

        result = PublishResult(
            group_id=group_id, remote_url=remote_url, dry_run=self._sync.dry_run
        )
        published = PublishedSet()

        for artifact in artifacts:
            if self._publish_artifact(artifact):
                published.add(artifact)
            else:
                result.skipped.append(artifact)
        result.published = list(published)

        for path in self._index.rebuild(group_id, published):
            self._sync.stage(path)

        if published:
            result.commit_message = commit_message(result.published)
            self._sync.commit_and_push(result.commit_message)
        else:
            logger.info("Nothing to publish, all artifacts are up to date")

        return result

    def _publish_artifact(self, artifact: Artifact) -> bool:
        artifact_dir = self._index.artifact_dir(artifact.bucket, artifact.artifact_id)
        if not should_publish(artifact, artifact_dir, force=self.force):
            return False

        logger.info(f"Downloading {artifact} to {artifact_dir}")
        with self._registry.download_javadoc(artifact) as archive:
            count = extract_archive(archive, artifact_dir)
        logger.debug(f"{artifact} unpacked {count} files")

        write_marker(artifact_dir, artifact.latest_version)
        self._sync.stage(artifact_dir)
        return True
