"""Pytest configuration and fixtures."""

import io
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Generator
from unittest.mock import MagicMock

import pytest

from javadoc_publisher.process.executor import ProcessExecutor, ProcessResult


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep JP_* variables from the host out of the tests."""
    for name in (
        "JP_BRANCH",
        "JP_REMOTE",
        "JP_SEARCH_URL",
        "JP_REPOSITORY_URL",
        "JP_SEARCH_ROWS",
        "JP_HTTP_TIMEOUT",
        "JP_READ_TIMEOUT",
        "JP_DEADLINE",
        "JP_TERMINATE_TIMEOUT",
        "JP_DRY_RUN",
        "JP_FORCE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def build_jar(entries: dict[str, bytes | None]) -> bytes:
    """Build a zip archive in memory; a None value makes a directory entry."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in entries.items():
            if content is None:
                zf.writestr(zipfile.ZipInfo(name.rstrip("/") + "/"), b"")
            else:
                zf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def make_jar() -> Callable[[dict[str, bytes | None]], bytes]:
    return build_jar


@pytest.fixture
def javadoc_jar() -> bytes:
    """A small Javadoc archive with an index page and a nested class page."""
    return build_jar(
        {
            "META-INF/": None,
            "META-INF/MANIFEST.MF": b"Manifest-Version: 1.0\n",
            "index.html": b"<html>index</html>",
            "com/": None,
            "com/example/Widget.html": b"<html>Widget</html>",
        }
    )


@pytest.fixture
def mock_executor() -> MagicMock:
    """An executor that records commands and succeeds without running them."""
    executor = MagicMock(spec=ProcessExecutor)
    executor.run.side_effect = lambda command, cwd=None: ProcessResult(
        command=[str(c) for c in command], exit_code=0, output=""
    )
    return executor

