"""
Javadoc Publisher Publish Module.

Provides the publish pipeline and the steps it drives.
"""

__all__ = [
    "PublishPipeline",
    "PublishResult",
    "RepositorySync",
    "IndexBuilder",
    "extract_archive",
    "should_publish",
]

from javadoc_publisher.publish.decision import should_publish
from javadoc_publisher.publish.extractor import extract_archive
from javadoc_publisher.publish.index import IndexBuilder
from javadoc_publisher.publish.pipeline import PublishPipeline, PublishResult
from javadoc_publisher.publish.repository import RepositorySync
