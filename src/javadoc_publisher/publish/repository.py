"""
Repository Sync - the git working copy of the publishing branch.

Clones the branch when the working directory is missing, pulls it when it
exists, stages changed paths and pushes a single commit per run. Every git
command runs with the working copy passed explicitly as its cwd.
"""

import logging
from pathlib import Path

from javadoc_publisher.core.exceptions import ProcessError, SyncError
from javadoc_publisher.process.executor import ProcessExecutor

logger = logging.getLogger(__name__)


class RepositorySync:
    """
    Keeps a local working copy of one branch in step with its remote.

    In dry-run mode ``commit_and_push`` only logs the commands it would run;
    clone, pull and staging still happen.
    """

    def __init__(
        self,
        directory: Path,
        executor: ProcessExecutor | None = None,
        branch: str = "gh-pages",
        remote: str = "origin",
        dry_run: bool = False,
    ):
        self.directory = directory.absolute()
        self._executor = executor or ProcessExecutor()
        self.branch = branch
        self.remote = remote
        self.dry_run = dry_run

    def ensure_up_to_date(self, remote_url: str) -> None:
        """
        Pull the working copy, or clone it if it does not exist yet.

        Raises:
            SyncError: If preparing the directory, cloning or pulling fails
        """
        if self.directory.is_dir():
            logger.info(f"Pulling latest from {remote_url} to {self.directory}")
            self._git("pull", cwd=self.directory)
            return

        logger.info(f"Checking out {remote_url} to {self.directory}")
        self._remove_stale_path()
        parent = self.directory.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SyncError(
                f"Failed to create parent of working directory {parent}: {e}",
                details={"path": str(parent)},
            ) from e
        self._git(
            "clone",
            "--single-branch",
            "--branch",
            self.branch,
            remote_url,
            str(self.directory),
        )

    def stage(self, path: Path) -> None:
        """Include path in the next commit."""
        self._git("add", str(path.absolute()), cwd=self.directory)

    def commit_and_push(self, message: str) -> list[list[str]]:
        """
        Commit everything staged and push it to the publishing branch.

        Returns:
            The commands run, or that would have been run in dry-run mode

        Raises:
            SyncError: If the commit or the push fails
        """
        commands = [
            ["git", "commit", "-m", message],
            ["git", "push", self.remote, self.branch],
        ]
        if self.dry_run:
            logger.info(f"DRY-RUN: git commit -m {message}")
            logger.info(f"DRY-RUN: git push {self.remote} {self.branch}")
            return commands

        for command in commands:
            self._git(*command[1:], cwd=self.directory)
        return commands

    def _remove_stale_path(self) -> None:
        path = self.directory
        if not (path.exists() or path.is_symlink()):
            return
        logger.debug(f"Removing stale {path}")
        try:
            path.unlink()
        except OSError as e:
            raise SyncError(
                f"Failed to remove stale working directory {path}: {e}",
                details={"path": str(path)},
            ) from e

    def _git(self, *args: str, cwd: Path | None = None) -> str:
        command = ["git", *args]
        try:
            return self._executor.run(command, cwd=cwd).output
        except ProcessError as e:
            raise SyncError(
                f"git {args[0]} failed: {e.message}",
                command=command,
                output=e.output,
                details={"cwd": str(cwd)} if cwd else None,
            ) from e
