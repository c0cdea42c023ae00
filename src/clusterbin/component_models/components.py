"""
Pydantic data models for components.json.

This module provides the static registry of managed components: where each
component's latest version is published, where its artifact and checksum
document live, and how its files are named locally.
"""

import json
import pathlib
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from clusterbin.clusterbin_exceptions import ComponentNotFoundError

COMPONENTS_JSON = pathlib.Path(__file__).parent / "components.json"


def clean_version(version: str) -> str:
    """Strip a single leading "v" from a version tag."""
    return version[1:] if version.startswith("v") else version


class ComponentDescriptor(BaseModel):
    """
    A single managed component.

    URL templates carry printf-style %s slots. One-slot templates receive the
    resolved version; two-slot templates receive the resolved version followed
    by the version without its leading "v".
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    name: str = Field("", description="Unique component identifier")
    version_url: str = Field(..., alias="versionUrl", description="Version discovery URL")
    url_pattern: str = Field(..., alias="urlPattern", description="Download URL template")
    hash_url: str = Field(..., alias="hashUrl", description="Checksum URL template")
    slots: int = Field(1, description="Number of %s slots in the URL templates")
    target_name: str = Field(
        "{name}", alias="targetName", description="Filename the checksum manifest refers to"
    )
    final_name: str = Field(
        "{name}", alias="finalName", description="Filename of the placed artifact"
    )

    @model_validator(mode="after")
    def check_slots(self) -> "ComponentDescriptor":
        if self.slots not in (1, 2):
            raise ValueError(f"slots must be 1 or 2, got {self.slots}")
        for template in (self.url_pattern, self.hash_url):
            if template.count("%s") != self.slots:
                raise ValueError(f"template {template!r} does not have {self.slots} slot(s)")
        return self

    def _slot_values(self, version: str) -> Tuple[str, ...]:
        if self.slots == 2:
            return (version, clean_version(version))
        return (version,)

    def _format_name(self, template: str, version: str) -> str:
        return template.format(
            name=self.name, version=version, clean_version=clean_version(version)
        )

    def download_url(self, version: str) -> str:
        return self.url_pattern % self._slot_values(version)

    def checksum_url(self, version: str) -> str:
        return self.hash_url % self._slot_values(version)

    def target_filename(self, version: str) -> str:
        return self._format_name(self.target_name, version)

    def final_filename(self, version: str = "") -> str:
        return self._format_name(self.final_name, version)


class ComponentRegistry(BaseModel):
    """
    Complete component registry.

    Structure:
    {
      "_description": "...",
      "components": {
        "component_name": ComponentDescriptor,
        ...
      }
    }

    Component order is preserved and is the default processing order.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    description: Optional[str] = Field(None, alias="_description")
    components: Dict[str, ComponentDescriptor] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def fill_names(cls, data):
        if isinstance(data, dict) and isinstance(data.get("components"), dict):
            components = {}
            for name, entry in data["components"].items():
                if isinstance(entry, dict):
                    entry = {**entry, "name": name}
                components[name] = entry
            data = {**data, "components": components}
        return data

    @classmethod
    def default(cls) -> "ComponentRegistry":
        """Load the registry bundled with clusterbin."""
        return cls.from_file(COMPONENTS_JSON)

    @classmethod
    def from_file(cls, path: pathlib.Path) -> "ComponentRegistry":
        with open(path, "r") as f:
            return cls(**json.load(f))

    def lookup(self, name: str) -> ComponentDescriptor:
        """
        Get the descriptor of a component.

        Raises:
            ComponentNotFoundError: If the component is not registered
        """
        try:
            return self.components[name]
        except KeyError:
            raise ComponentNotFoundError(f"component {name} not found") from None

    def names(self) -> List[str]:
        return list(self.components.keys())
