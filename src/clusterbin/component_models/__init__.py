"""
Component models.

This package provides Pydantic data models for the static registry of
components managed by clusterbin, along with their endpoint templates and
file naming rules.
"""

from .components import (
    ComponentDescriptor,
    ComponentRegistry,
    clean_version,
)

__all__ = [
    "ComponentDescriptor",
    "ComponentRegistry",
    "clean_version",
]
