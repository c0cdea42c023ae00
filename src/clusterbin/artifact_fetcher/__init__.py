"""
Artifact fetcher.

This package handles:
1. Resolving the latest version of each component
2. Downloading artifacts to a staging location
3. Verifying them against the published checksums
4. Placing verified artifacts and recording component states
"""

from .fetcher import ArtifactFetcher

__all__ = ["ArtifactFetcher"]
