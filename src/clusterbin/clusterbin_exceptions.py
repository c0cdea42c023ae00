"""
This module contains the exceptions raised by the clusterbin framework.
"""

from typing import Optional


class ClusterbinException(Exception):
    """
    Base exception for all errors raised while fetching a component.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(ClusterbinException):
    """Raised when the clusterbin configuration is invalid."""


class ComponentNotFoundError(ClusterbinException):
    """Raised when a component name is not present in the registry."""


class NetworkError(ClusterbinException):
    """Raised on transport or connection failure."""


class HTTPStatusError(ClusterbinException):
    """
    Raised when a required fetch returns a non-success status.
    """

    def __init__(self, url: str, status_code: int):
        super().__init__(f"HTTP {status_code} from {url}")
        self.url = url
        self.status_code = status_code


class ResolutionError(ClusterbinException):
    """Raised when no version can be extracted from a version document."""


class NotFoundError(ClusterbinException):
    """Raised when the target filename is missing from a checksum manifest."""


class HashRetrievalError(ClusterbinException):
    """Raised when the expected hash of an artifact cannot be obtained."""


class DownloadError(ClusterbinException):
    """Raised when an artifact download fails."""


class IntegrityError(ClusterbinException):
    """
    Raised when a downloaded artifact does not match its expected hash.
    """

    def __init__(self, expected: str, actual: Optional[str]):
        super().__init__(f"hash mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class FilesystemError(ClusterbinException):
    """Raised when staging or placing an artifact on disk fails."""
