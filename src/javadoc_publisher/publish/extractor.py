"""
Archive Extractor - unpack a Javadoc jar into a directory.

Every file entry is written to its relative path under the destination.
Directory entries are skipped; parents are created as files need them.
There is no rollback: files written before a failure stay on disk.
"""

import logging
import os
import shutil
import zipfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from javadoc_publisher.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)


def extract_archive(archive: BinaryIO | Path, destination: Path) -> int:
    """
    Extract a zip archive into destination.

    Args:
        archive: Seekable binary stream or path of the archive
        destination: Directory to extract into; created if missing

    Returns:
        Number of files written

    Raises:
        ExtractionError: If the archive is malformed, an entry would escape
            the destination, or a file or directory cannot be written
    """
    if _is_empty(archive):
        logger.debug(f"Archive for {destination} is empty")
        return 0

    written = 0
    entry_name: str | None = None
    try:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                entry_name = info.filename
                if info.is_dir():
                    continue
                target = destination.joinpath(*_safe_parts(entry_name, destination))
                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as source, open(target, "wb") as sink:
                    shutil.copyfileobj(source, sink)
                written += 1
    except zipfile.BadZipFile as e:
        raise ExtractionError(
            f"Malformed archive: {e}",
            destination=str(destination),
            entry=entry_name,
        ) from e
    except (OSError, EOFError) as e:
        raise ExtractionError(
            f"Failed to write {entry_name}: {e}",
            destination=str(destination),
            entry=entry_name,
        ) from e

    logger.debug(f"Extracted {written} files to {destination}")
    return written


def _safe_parts(name: str, destination: Path) -> tuple[str, ...]:
    """Split an entry name into path parts, refusing paths that leave destination."""
    path = PurePosixPath(name.replace("\\", "/"))
    parts = tuple(part for part in path.parts if part not in ("", "."))
    if path.is_absolute() or ".." in parts or not parts:
        raise ExtractionError(
            f"Refusing to extract entry outside destination: {name}",
            destination=str(destination),
            entry=name,
        )
    return parts


def _is_empty(archive: BinaryIO | Path) -> bool:
    if isinstance(archive, (str, os.PathLike)):
        return os.path.getsize(archive) == 0
    position = archive.tell()
    end = archive.seek(0, os.SEEK_END)
    archive.seek(position)
    return end == position
