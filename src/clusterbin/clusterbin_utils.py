"""
This file contains various utility functions like I/O operations, handling paths, etc.
"""

import hashlib
import logging
import os
import pathlib
import shutil
from typing import Optional
from urllib.parse import urlparse

import requests

from clusterbin.clusterbin_exceptions import (
    DownloadError,
    FilesystemError,
    HTTPStatusError,
    NetworkError,
)
from clusterbin.clusterbin_logger import ClusterbinLogger

CHUNK_SIZE = 1024 * 1024


class UrlTransform:
    """
    Pass-through transform applied to every outbound URL.

    When a mirror prefix is configured, a URL starting with the upstream prefix
    has that prefix replaced once. Every other URL is returned unchanged.
    """

    def __init__(self, mirror_prefix: Optional[str] = None, upstream_prefix: str = "https://github.com"):
        self.mirror_prefix = mirror_prefix
        self.upstream_prefix = upstream_prefix

    def __call__(self, url: str) -> str:
        if self.mirror_prefix and url.startswith(self.upstream_prefix):
            return self.mirror_prefix + url[len(self.upstream_prefix):]
        return url

    def __repr__(self) -> str:
        return f"UrlTransform(upstream={self.upstream_prefix}, mirror={self.mirror_prefix})"


class HttpUtils:
    """
    Blocking HTTP access for a single run. Every call is bounded by the configured timeout.
    """

    def __init__(
        self,
        session: requests.Session,
        logger: ClusterbinLogger,
        timeout: float,
    ):
        self.session = session
        self.logger = logger
        self.timeout = timeout

    def get_text(self, url: str) -> str:
        """
        Fetch the body of url as text.

        Raises:
            NetworkError: On transport failure
            HTTPStatusError: If the response status is not 200
        """
        self.logger.log(f"GET {url}", logging.DEBUG)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(f"Failed to fetch {url}: {e}") from e

        try:
            if response.status_code != 200:
                raise HTTPStatusError(url, response.status_code)
            return response.text
        except requests.RequestException as e:
            raise NetworkError(f"Failed to read {url}: {e}") from e
        finally:
            response.close()

    def download_file(self, url: str, target_path: pathlib.Path) -> None:
        """
        Stream url into target_path. A partially written file is removed on failure.

        Raises:
            DownloadError: On transport failure or a non-200 response
            FilesystemError: If the staging file cannot be written
        """
        self.logger.log(f"Downloading {url} to {target_path}", logging.DEBUG)
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                if response.status_code != 200:
                    raise DownloadError(f"HTTP {response.status_code} from {url}")
                with open(target_path, "wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except DownloadError:
            self._discard(target_path)
            raise
        except requests.RequestException as e:
            self._discard(target_path)
            raise DownloadError(f"Failed to download {url}: {e}") from e
        except OSError as e:
            self._discard(target_path)
            raise FilesystemError(f"Failed to write staging file {target_path}: {e}") from e

    def _discard(self, target_path: pathlib.Path) -> None:
        if not FileUtils.remove_quietly(target_path):
            self.logger.log(f"Could not remove partial download {target_path}", logging.WARNING)

    @staticmethod
    def filename_from_url(url: str) -> str:
        """Return the last path segment of url."""
        return pathlib.PurePosixPath(urlparse(url).path).name


class FileUtils:
    """
    Utility functions for hashing and placing files
    """

    @staticmethod
    def sha256_of_file(path: pathlib.Path) -> str:
        """Return the hex SHA-256 digest of the full content of path."""
        h = hashlib.sha256()
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                h.update(chunk)
        return h.hexdigest()

    @staticmethod
    def is_up_to_date(path: pathlib.Path, expected_hash: str) -> bool:
        """
        Check whether a previously placed artifact already matches expected_hash.

        Missing paths, directories and unreadable files are never up to date.
        """
        path = pathlib.Path(path)
        try:
            if not path.exists() or path.is_dir():
                return False
            return FileUtils.sha256_of_file(path) == expected_hash
        except OSError:
            return False

    @staticmethod
    def remove_quietly(path: pathlib.Path) -> bool:
        """
        Remove path if it exists. Returns False if it could not be removed.
        """
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError:
            return False
        return True

    @staticmethod
    def place_file(staged_path: pathlib.Path, final_path: pathlib.Path) -> bool:
        """
        Move staged_path to final_path.

        A rename is tried first. If it fails (e.g. across filesystems) the file is
        copied next to final_path and swapped in with a rename, so nothing partial
        is ever visible under the final name.

        Returns:
            False if the artifact was placed but the staged copy could not be removed

        Raises:
            FilesystemError: If the file could not be placed
        """
        try:
            os.replace(staged_path, final_path)
            return True
        except OSError:
            pass

        part_path = final_path.with_name(f".{final_path.name}.part")
        try:
            shutil.copyfile(staged_path, part_path)
            shutil.copymode(staged_path, part_path)
            os.replace(part_path, final_path)
        except OSError as e:
            FileUtils.remove_quietly(part_path)
            raise FilesystemError(f"Failed to move {staged_path} to {final_path}: {e}") from e

        return FileUtils.remove_quietly(staged_path)
