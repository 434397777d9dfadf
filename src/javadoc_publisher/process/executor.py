"""
Process Executor - run external commands with bounded timeouts.

Commands run with stdout and stderr merged. Reading is bounded by an idle
timeout (no output for too long) and an overall deadline, and the child is
always terminated before ``run`` returns or raises.
"""

import logging
import os
import queue
import subprocess
import threading
import time
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import IO, Sequence

from javadoc_publisher.core.exceptions import ProcessError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of a successful command."""

    command: list[str]
    exit_code: int
    output: str


class ProcessExecutor:
    """
    Runs commands to completion and captures their combined output.

    Timeouts:
    - read_timeout: longest gap allowed between two chunks of output
    - deadline: longest time allowed for the whole output to be read
    - terminate_timeout: how long to wait for the process to exit once its
      output is closed, and again after asking it to terminate
    """

    def __init__(
        self,
        read_timeout: float = 30.0,
        deadline: float = 300.0,
        terminate_timeout: float = 30.0,
    ):
        self.read_timeout = read_timeout
        self.deadline = deadline
        self.terminate_timeout = terminate_timeout

    def run(self, command: Sequence[str | Path], cwd: Path | None = None) -> ProcessResult:
        """
        Run a command and wait for it to finish.

        Args:
            command: Program and arguments; never passed through a shell
            cwd: Working directory for the child, or the current one if None

        Returns:
            ProcessResult with exit code 0 and the captured output

        Raises:
            ProcessError: On non-zero exit, timeout, or if the program
                cannot be started
        """
        argv = [str(part) for part in command]
        logger.debug(f"Running {' '.join(argv)}" + (f" in {cwd}" if cwd else ""))

        try:
            process = subprocess.Popen(
                argv,
                cwd=str(cwd) if cwd is not None else None,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                shell=False,
            )
        except OSError as e:
            raise ProcessError(
                f"Failed to execute {argv[0]}: {e}",
                command=argv,
            ) from e

        buffer = bytearray()
        with process:
            try:
                exit_code = self._collect(process, argv, buffer)
            finally:
                self._terminate(process)

        output = _decode(buffer)
        if exit_code != 0:
            raise ProcessError(
                f"Process returned {exit_code}",
                command=argv,
                exit_code=exit_code,
                output=output,
            )
        return ProcessResult(command=argv, exit_code=exit_code, output=output)

    def _collect(
        self, process: subprocess.Popen, argv: list[str], buffer: bytearray
    ) -> int:
        """Drain output into buffer, then wait for the exit status."""
        chunks: queue.Queue[bytes | None] = queue.Queue()
        reader = threading.Thread(
            target=_pump, args=(process.stdout, chunks), daemon=True
        )
        reader.start()

        deadline = time.monotonic() + self.deadline
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise self._timeout(argv, buffer, f"deadline of {self.deadline:g}s exceeded")
            try:
                chunk = chunks.get(timeout=min(self.read_timeout, remaining))
            except queue.Empty:
                if time.monotonic() >= deadline:
                    reason = f"deadline of {self.deadline:g}s exceeded"
                else:
                    reason = f"no output for {self.read_timeout:g}s"
                raise self._timeout(argv, buffer, reason) from None
            if chunk is None:
                break
            buffer.extend(chunk)

        try:
            return process.wait(timeout=self.terminate_timeout)
        except subprocess.TimeoutExpired:
            raise self._timeout(
                argv, buffer, f"process did not exit within {self.terminate_timeout:g}s"
            ) from None

    def _terminate(self, process: subprocess.Popen) -> None:
        if process.poll() is not None:
            return
        process.terminate()
        try:
            process.wait(timeout=self.terminate_timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"Process {process.pid} ignored terminate, killing it")
            process.kill()
            process.wait()

    @staticmethod
    def _timeout(argv: list[str], buffer: bytearray, reason: str) -> ProcessError:
        return ProcessError(
            f"Timed out executing {argv[0]}: {reason}",
            command=argv,
            output=_decode(buffer),
            timed_out=True,
        )


def _pump(stream: IO[bytes], chunks: "queue.Queue[bytes | None]") -> None:
    """Copy a pipe into a queue until EOF; None marks the end."""
    try:
        for chunk in iter(partial(os.read, stream.fileno(), _CHUNK_SIZE), b""):
            chunks.put(chunk)
    except (OSError, ValueError):
        # pipe closed underneath us during termination
        pass
    finally:
        chunks.put(None)


def _decode(buffer: bytearray) -> str:
    return bytes(buffer).decode("utf-8", errors="replace")
