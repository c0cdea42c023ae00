"""
Latest-version discovery.

Two upstream shapes are supported: plain version files, whose trimmed body is
the version, and release-API JSON documents, from which the value following
the "tag_name" key is scanned out without parsing the whole document.
"""

import logging
from typing import Optional

from clusterbin.clusterbin_exceptions import ResolutionError
from clusterbin.clusterbin_logger import ClusterbinLogger
from clusterbin.clusterbin_utils import HttpUtils, UrlTransform

RELEASE_API_MARKER = "api.github.com"
TAG_NAME_TOKEN = '"tag_name":'


def extract_tag_name(body: str) -> str:
    """
    Return the quoted value immediately following the first "tag_name" key.

    Raises:
        ResolutionError: If the key is absent or its value is not a non-empty quoted string
    """
    idx = body.find(TAG_NAME_TOKEN)
    if idx == -1:
        raise ResolutionError("failed to extract version from release API: tag_name not found")

    rest = body[idx + len(TAG_NAME_TOKEN):]
    if not rest.startswith('"'):
        raise ResolutionError("failed to extract version from release API: tag_name is not a string")

    end = rest.find('"', 1)
    if end == -1:
        raise ResolutionError("failed to extract version from release API: unterminated tag_name")

    tag = rest[1:end]
    if not tag:
        raise ResolutionError("failed to extract version from release API: empty tag_name")
    return tag


def is_release_api_url(url: str) -> bool:
    return RELEASE_API_MARKER in url


class VersionResolver:
    """
    Resolves the latest version of a component from its version-discovery URL.
    """

    def __init__(
        self,
        http: HttpUtils,
        logger: ClusterbinLogger,
        transform: Optional[UrlTransform] = None,
    ):
        self.http = http
        self.logger = logger
        self.transform = transform or UrlTransform()

    def resolve(self, url: str) -> str:
        """
        Fetch url and extract the version string.

        Raises:
            NetworkError: On transport failure
            HTTPStatusError: If the response status is not 200
            ResolutionError: If no version can be extracted
        """
        url = self.transform(url)
        body = self.http.get_text(url)

        if is_release_api_url(url):
            version = extract_tag_name(body)
        else:
            version = body.strip()
            if not version:
                raise ResolutionError(f"empty version document at {url}")

        self.logger.log(f"Resolved {version} from {url}", logging.DEBUG)
        return version
