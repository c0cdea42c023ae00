"""
Configuration parameters for clusterbin.

The configuration describes the outbound transport (proxy, mirror, timeout) and
the local filesystem layout. It is established once before any component is
processed and never mutated afterwards.
"""

import pathlib
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

try:
    import tomllib
except ModuleNotFoundError:
    # Python < 3.11
    import tomli as tomllib

import requests

from clusterbin.clusterbin_exceptions import ConfigurationError
from clusterbin.clusterbin_utils import UrlTransform

DEFAULT_UPSTREAM_PREFIX = "https://github.com"
DEFAULT_TIMEOUT = 60.0


@dataclass
class ClusterbinConfig:
    """
    Configuration parameters
    """

    proxy_url: Optional[str] = None
    mirror_prefix: Optional[str] = None
    upstream_prefix: str = DEFAULT_UPSTREAM_PREFIX
    timeout: float = DEFAULT_TIMEOUT
    output_dir: pathlib.Path = pathlib.Path("bin")
    staging_dir: pathlib.Path = pathlib.Path("temp")
    components: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.output_dir = pathlib.Path(self.output_dir)
        self.staging_dir = pathlib.Path(self.staging_dir)

        if not isinstance(self.timeout, (int, float)) or isinstance(self.timeout, bool):
            raise ConfigurationError(f"'timeout' must be a number, got {self.timeout!r}")
        if self.timeout <= 0:
            raise ConfigurationError(f"'timeout' must be positive, got {self.timeout}")
        if not isinstance(self.components, list):
            raise ConfigurationError("'components' must be a list")
        if self.proxy_url == "":
            self.proxy_url = None
        if self.mirror_prefix == "":
            self.mirror_prefix = None

    @classmethod
    def from_dict(cls, env: Dict[str, Any]) -> "ClusterbinConfig":
        """
        Create a ClusterbinConfig instance from a dictionary. Unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in env.items() if k in known})

    @classmethod
    def from_toml(cls, path: pathlib.Path) -> "ClusterbinConfig":
        """
        Load the configuration from the [clusterbin] table of a TOML file.

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        try:
            with open(path, "rb") as f:
                toml_dict = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(f"Failed to load {path}: {e}") from e

        section = toml_dict.get("clusterbin", {})
        if not isinstance(section, dict):
            raise ConfigurationError(f"[clusterbin] in {path} must be a table")
        return cls.from_dict(section)

    def url_transform(self) -> UrlTransform:
        """Build the outbound URL transform described by this configuration."""
        return UrlTransform(
            mirror_prefix=self.mirror_prefix,
            upstream_prefix=self.upstream_prefix,
        )

    def build_session(self) -> requests.Session:
        """
        Build the HTTP session shared by every outbound request of a run.
        """
        session = requests.Session()
        if self.proxy_url:
            # environment proxies would otherwise take precedence over session proxies
            session.trust_env = False
            session.proxies.update({"http": self.proxy_url, "https": self.proxy_url})
        return session
