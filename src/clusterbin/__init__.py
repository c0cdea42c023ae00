"""
clusterbin resolves, downloads and verifies the latest release artifacts of
cluster infrastructure binaries.
"""

from clusterbin.artifact_fetcher import ArtifactFetcher
from clusterbin.clusterbin_config import ClusterbinConfig
from clusterbin.clusterbin_logger import ClusterbinLogger
from clusterbin.component_models import ComponentDescriptor, ComponentRegistry
from clusterbin.fetch_plan import ComponentState, FetchStatus

__all__ = [
    "ArtifactFetcher",
    "ClusterbinConfig",
    "ClusterbinLogger",
    "ComponentDescriptor",
    "ComponentRegistry",
    "ComponentState",
    "FetchStatus",
]
