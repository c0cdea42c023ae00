"""
Shared fixtures: an in-memory stand-in for requests.Session and a test configuration.
"""

from typing import Dict, List, Tuple, Union

import pytest
import requests

from clusterbin.clusterbin_config import ClusterbinConfig
from clusterbin.clusterbin_logger import ClusterbinLogger


class FakeResponse:
    def __init__(self, status_code: int, content: bytes):
        self.status_code = status_code
        self.content = content
        self.closed = False

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def iter_content(self, chunk_size: int = 1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]

    def close(self) -> None:
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


Route = Union[Tuple[int, bytes], Exception]


class FakeSession:
    """
    Serves canned responses keyed by exact URL and records every request.

    Unknown URLs answer 404.
    """

    def __init__(self, routes: Dict[str, Route] = None):
        self.routes: Dict[str, Route] = dict(routes or {})
        self.calls: List[Tuple[str, bool]] = []

    def add(self, url: str, body: Union[str, bytes], status_code: int = 200) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.routes[url] = (status_code, body)

    def fail(self, url: str, error: Exception = None) -> None:
        self.routes[url] = error or requests.ConnectionError(f"connection refused: {url}")

    def get(self, url, timeout=None, stream=False, **kwargs):
        self.calls.append((url, stream))
        route = self.routes.get(url, (404, b"Not Found"))
        if isinstance(route, Exception):
            raise route
        status_code, body = route
        return FakeResponse(status_code, body)

    def requested(self, url: str) -> int:
        return sum(1 for called, _ in self.calls if called == url)

    def downloads(self) -> List[str]:
        return [url for url, stream in self.calls if stream]


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def logger():
    return ClusterbinLogger()


@pytest.fixture
def config(tmp_path):
    return ClusterbinConfig(
        output_dir=tmp_path / "bin",
        staging_dir=tmp_path / "temp",
    )
