"""
Release version resolution.

This package handles:
1. Fetching version-discovery documents
2. Extracting the latest version from plain version files
3. Extracting the latest version from release-API JSON documents
"""

from .resolver import VersionResolver, extract_tag_name

__all__ = ["VersionResolver", "extract_tag_name"]
