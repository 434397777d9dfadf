"""
Javadoc Publisher Exception Hierarchy.

Defines all custom exceptions raised by the publish pipeline and its
collaborators. None of them are retried; each aborts the current run.
"""

from typing import Any


class PublisherError(Exception):
    """
    A publish run could not finish.

    The CLI reports any of these as a failed run instead of a traceback.
    Whatever the run already extracted and marked stays in the working copy,
    so the next run resumes from there. ``details`` names the coordinate,
    path or command involved.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        """
        Args:
            message: What failed, phrased for the person running the publish
            details: Paths, coordinates or commands involved in the failure
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Message followed by the details as key=value pairs."""
        base = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{base} ({details_str})"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Error type, message and details as a plain dict."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class FetchError(PublisherError):
    """
    Errors talking to the package registry.

    Raised when:
    - The registry is unreachable
    - A search or download returns a non-success status
    - A search response cannot be parsed
    - A returned artifact id or version cannot be used as a directory name
    """

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        response_body: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a FetchError.

        Args:
            message: Human-readable error message
            url: Requested URL
            status_code: HTTP status code if a response was received
            response_body: Body of the failed response
            details: Optional structured data for debugging
        """
        details = details or {}
        if url:
            details["url"] = url
        if status_code:
            details["status_code"] = status_code

        super().__init__(message, details=details)
        self.url = url
        self.status_code = status_code
        self.response_body = response_body

    def __str__(self) -> str:
        base = super().__str__()
        if self.response_body:
            return f"{base}:\n{self.response_body}"
        return base


class ExtractionError(PublisherError):
    """
    Errors while unpacking a documentation archive.

    Raised when the archive is malformed, when an entry would land outside
    the destination, or when writing the extracted files, the version marker
    or a bucket index fails.
    """

    def __init__(
        self,
        message: str,
        *,
        destination: str | None = None,
        entry: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize an ExtractionError.

        Args:
            message: Human-readable error message
            destination: Directory being extracted into
            entry: Archive entry being written when the failure occurred
            details: Optional structured data for debugging
        """
        details = details or {}
        if destination:
            details["destination"] = destination
        if entry:
            details["entry"] = entry

        super().__init__(message, details=details)
        self.destination = destination
        self.entry = entry


class ProcessError(PublisherError):
    """
    Raised when a subprocess exits non-zero, times out or cannot start.

    Carries the command and whatever output was captured before the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        exit_code: int | None = None,
        output: str = "",
        timed_out: bool = False,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if command:
            details["command"] = " ".join(command)
        if exit_code is not None:
            details["exit_code"] = exit_code
        if timed_out:
            details["timed_out"] = True

        super().__init__(message, details=details)
        self.command = list(command or [])
        self.exit_code = exit_code
        self.output = output
        self.timed_out = timed_out

    def __str__(self) -> str:
        base = super().__str__()
        if self.output:
            return f"{base}:\n{self.output}"
        return base


class SyncError(PublisherError):
    """
    Errors synchronising the publishing working copy.

    Raised when clone, pull, add, commit or push fail, or when a stale
    working directory cannot be removed before cloning.
    """

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        output: str = "",
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a SyncError.

        Args:
            message: Human-readable error message
            command: Version control command that failed
            output: Captured combined output of the command
            details: Optional structured data for debugging
        """
        details = details or {}
        if command:
            details["command"] = " ".join(command)

        super().__init__(message, details=details)
        self.command = list(command or [])
        self.output = output

    def __str__(self) -> str:
        base = super().__str__()
        if self.output:
            return f"{base}:\n{self.output}"
        return base


class UsageError(PublisherError):
    """Raised when the publisher is invoked with invalid arguments."""

    def __init__(
        self,
        message: str,
        *,
        argument: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if argument:
            details["argument"] = argument

        super().__init__(message, details=details)
        self.argument = argument


class ConfigurationError(PublisherError):
    """
    Errors in configuration loading or validation.

    Raised when an environment variable holds a value that cannot be
    converted to the expected type.
    """

    def __init__(
        self,
        message: str,
        *,
        env_var: str | None = None,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a ConfigurationError.

        Args:
            message: Human-readable error message
            env_var: Environment variable name if applicable
            config_key: Configuration key if applicable
            details: Optional structured data for debugging
        """
        details = details or {}
        if env_var:
            details["env_var"] = env_var
        if config_key:
            details["config_key"] = config_key

        super().__init__(message, details=details)
        self.env_var = env_var
        self.config_key = config_key


def format_exception(error: Exception) -> str:
    """
    Format an exception for user-friendly display.

    Args:
        error: The exception to format

    Returns:
        Formatted error message string
    """
    if isinstance(error, PublisherError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"
