"""
Javadoc Publisher Registry Module.

Provides the Maven Central client used to discover and download archives.
"""

__all__ = ["MavenCentralClient"]

from javadoc_publisher.registry.client import MavenCentralClient
