"""
Maven Central Client - latest artifact versions and Javadoc downloads.

Searches go to the search.maven.org Solr API; archives are fetched from the
Maven 2 repository layout.
"""

import logging
import tempfile
from typing import BinaryIO

import httpx
from pydantic import BaseModel, Field

from javadoc_publisher.config import PublisherConfig
from javadoc_publisher.core.exceptions import FetchError
from javadoc_publisher.core.models import JAVADOC_EXTENSION, Artifact

logger = logging.getLogger(__name__)

# Archives larger than this spill from memory to a temporary file.
_SPOOL_MAX_SIZE = 16 * 1024 * 1024


class _SearchResponse(BaseModel):
    docs: list[Artifact] = Field(default_factory=list)


class _SearchResult(BaseModel):
    response: _SearchResponse


class MavenCentralClient:
    """
    Programmatic access to Maven Central.

    Owns an ``httpx.Client``; close it with ``close()`` or use the client as
    a context manager.
    """

    def __init__(
        self,
        config: PublisherConfig | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the client, creating an HTTP client unless one is given."""
        self._config = config or PublisherConfig()
        self._client = http_client or httpx.Client(
            timeout=self._config.http_timeout_seconds,
            follow_redirects=True,
        )

    def latest_artifacts(self, group_id: str) -> list[Artifact]:
        """
        Return the latest version of up to ``search_rows`` artifacts in a group.

        Raises:
            FetchError: If the search fails or returns an unexpected payload
        """
        url = f"{self._config.search_url.rstrip('/')}/solrsearch/select"
        params = {
            "q": f'g:"{group_id}"',
            "rows": self._config.search_rows,
            "wt": "json",
        }

        try:
            response = self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise FetchError(
                f"Failed to search artifacts of {group_id}: {e}",
                url=url,
            ) from e

        if not response.is_success:
            raise _status_error(f"Failed to search artifacts of {group_id}", response)

        try:
            result = _SearchResult.model_validate_json(response.content)
        except ValueError as e:
            raise FetchError(
                f"Unexpected search response for {group_id}",
                url=str(response.url),
                details={"error": str(e).splitlines()[0]},
            ) from e

        return result.response.docs

    def javadoc_url(self, artifact: Artifact) -> str:
        """Return the repository URL of an artifact's Javadoc archive."""
        group_path = artifact.group_id.replace(".", "/")
        name = artifact.artifact_id
        version = artifact.latest_version
        return (
            f"{self._config.repository_url.rstrip('/')}/{group_path}/{name}/{version}/"
            f"{name}-{version}{JAVADOC_EXTENSION}"
        )

    def download_javadoc(self, artifact: Artifact) -> BinaryIO:
        """
        Download an artifact's Javadoc archive.

        Returns:
            A seekable file positioned at the start of the archive; the
            caller is responsible for closing it

        Raises:
            FetchError: If the download fails or returns a non-success status
        """
        url = self.javadoc_url(artifact)
        archive = tempfile.SpooledTemporaryFile(max_size=_SPOOL_MAX_SIZE)
        try:
            with self._client.stream("GET", url) as response:
                if not response.is_success:
                    response.read()
                    raise _status_error(f"Failed to download {artifact}", response)
                for chunk in response.iter_bytes():
                    archive.write(chunk)
        except httpx.HTTPError as e:
            archive.close()
            raise FetchError(f"Failed to download {artifact}: {e}", url=url) from e
        except FetchError:
            archive.close()
            raise

        logger.debug(f"Downloaded {archive.tell()} bytes from {url}")
        archive.seek(0)
        return archive

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()


def _status_error(message: str, response: httpx.Response) -> FetchError:
    return FetchError(
        f"{message} ({response.status_code} {response.reason_phrase})",
        url=str(response.url),
        status_code=response.status_code,
        response_body=response.text,
    )
