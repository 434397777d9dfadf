"""
Publish decision - is an artifact's published copy out of date?

The ``version.txt`` marker next to each extracted tree records the exact
version last written there. It is the only record of what is published.
"""

import logging
from pathlib import Path

from javadoc_publisher.core.exceptions import ExtractionError
from javadoc_publisher.core.models import Artifact

logger = logging.getLogger(__name__)

MARKER_NAME = "version.txt"


def marker_path(artifact_dir: Path) -> Path:
    return artifact_dir / MARKER_NAME


def read_marker(artifact_dir: Path) -> str | None:
    """Return the published version recorded in artifact_dir, or None."""
    marker = marker_path(artifact_dir)
    if not marker.is_file():
        return None
    return marker.read_bytes().decode("utf-8", errors="replace")


def write_marker(artifact_dir: Path, version: str) -> Path:
    """
    Record version as the one published in artifact_dir.

    Raises:
        ExtractionError: If the marker cannot be written, for instance when
            the archive itself put a directory where the marker belongs
    """
    marker = marker_path(artifact_dir)
    try:
        marker.parent.mkdir(parents=True, exist_ok=True)
        marker.write_bytes(version.encode("utf-8"))
    except OSError as e:
        raise ExtractionError(
            f"Failed to write version marker {marker}: {e}",
            destination=str(artifact_dir),
            details={"path": str(marker)},
        ) from e
    return marker


def should_publish(artifact: Artifact, artifact_dir: Path, force: bool = False) -> bool:
    """
    Decide whether an artifact needs to be downloaded again.

    Args:
        artifact: Artifact with its current latest version
        artifact_dir: Directory the artifact's Javadoc is published in
        force: Republish even when the marker matches

    Returns:
        False when the artifact has no Javadoc or the marker already holds
        exactly the latest version (unless forced), True otherwise
    """
    if not artifact.has_javadoc:
        logger.info(f"Skipping {artifact}, artifact has no Javadoc")
        return False

    if read_marker(artifact_dir) == artifact.latest_version:
        if force:
            logger.info(
                f"{artifact_dir} is up to date, but downloading anyway due to --force"
            )
            return True
        logger.info(f"Skipping {artifact_dir}, artifact is up to date")
        return False

    return True
