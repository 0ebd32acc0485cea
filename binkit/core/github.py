"""
GitHub Releases client.

Resolves the latest release tag of a repository through the REST API:

    GET https://api.github.com/repos/{owner}/{repo}/releases/latest

Only ``tag_name`` is read from the response. A token raises the API rate
limit but is never required.
"""

import logging
from typing import Optional

import requests
from requests.exceptions import RequestException

from binkit.core.download import DEFAULT_TIMEOUT
from binkit.core.exceptions import RemoteVersionUnavailableError
from binkit.core.version import normalize_version

logger = logging.getLogger(__name__)

API_URL = "https://api.github.com"
RELEASE_DOWNLOAD_URL = "https://github.com/{repository}/releases/download/v{version}/{file_name}"


class GitHubClient:
    """
    Minimal GitHub Releases API client.

    Example:
        >>> client = GitHubClient(token=os.environ.get("GITHUB_TOKEN"))
        >>> client.latest_version("jqlang/jq")
        '1.7.1'
    """

    def __init__(
        self,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        api_url: str = API_URL,
    ):
        """
        Initialize client.

        Args:
            token: Optional GitHub token sent as a bearer credential
            timeout: Request timeout in seconds
            session: Optional requests session (created if None)
            api_url: API base URL
        """
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.api_url = api_url.rstrip("/")

    def headers(self) -> dict:
        """Headers sent with every API request."""
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def latest_release_tag(self, repository: str) -> str:
        """
        Get the raw tag name of a repository's latest release.

        Args:
            repository: 'owner/name'

        Returns:
            Tag name exactly as published (e.g. 'v1.2.3')

        Raises:
            RemoteVersionUnavailableError: On any network, HTTP or payload error
        """
        url = f"{self.api_url}/repos/{repository}/releases/latest"
        logger.debug(f"Querying latest release: {url}")

        try:
            response = self.session.get(
                url, headers=self.headers(), timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except RequestException as e:
            raise RemoteVersionUnavailableError(
                f"Failed to get latest version for {repository}: {e}"
            ) from e
        except ValueError as e:
            raise RemoteVersionUnavailableError(
                f"Malformed release metadata for {repository}: {e}"
            ) from e

        tag = payload.get("tag_name") if isinstance(payload, dict) else None
        if not isinstance(tag, str) or not tag.strip():
            raise RemoteVersionUnavailableError(
                f"No release tag found for {repository}"
            )

        return tag.strip()

    def latest_version(self, repository: str) -> str:
        """
        Get the normalized version of a repository's latest release.

        Raises:
            RemoteVersionUnavailableError: If the tag cannot be determined
        """
        version = normalize_version(self.latest_release_tag(repository))
        if not version:
            raise RemoteVersionUnavailableError(
                f"Empty release tag for {repository}"
            )
        return version


def release_download_url(repository: str, version: str, file_name: str) -> str:
    """
    Build a release asset URL.

    The tag is always 'v'-prefixed, whatever the repository's own tagging
    convention is.

    Example:
        >>> release_download_url("owner/tool", "1.2.3", "tool.tar.gz")
        'https://github.com/owner/tool/releases/download/v1.2.3/tool.tar.gz'
    """
    return RELEASE_DOWNLOAD_URL.format(
        repository=repository, version=version, file_name=file_name
    )


__all__ = ["API_URL", "GitHubClient", "release_download_url"]
