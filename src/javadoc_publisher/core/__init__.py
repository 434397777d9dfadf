"""
Javadoc Publisher Core Module.

Provides the artifact model, version bucketing and the exception hierarchy.
"""

__all__ = [
    "Artifact",
    "PublishedSet",
    "version_bucket",
    "JAVADOC_EXTENSION",
    # Exceptions
    "PublisherError",
    "FetchError",
    "ExtractionError",
    "ProcessError",
    "SyncError",
    "UsageError",
    "ConfigurationError",
]

from javadoc_publisher.core.exceptions import (
    ConfigurationError,
    ExtractionError,
    FetchError,
    ProcessError,
    PublisherError,
    SyncError,
    UsageError,
)
from javadoc_publisher.core.models import (
    JAVADOC_EXTENSION,
    Artifact,
    PublishedSet,
    version_bucket,
)
