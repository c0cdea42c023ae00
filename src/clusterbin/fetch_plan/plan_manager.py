"""
Fetch plan manager.

Turns a component descriptor and a resolved version into a concrete fetch plan
(URLs, filenames, paths) and tracks the outcome of every component in a run.
"""

import pathlib
from typing import Dict, List, Optional

from clusterbin.clusterbin_config import ClusterbinConfig
from clusterbin.clusterbin_utils import HttpUtils, UrlTransform
from clusterbin.component_models import ComponentDescriptor, ComponentRegistry


class FetchStatus:
    """Enumeration of fetch statuses."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    FAILED = "failed"


class FetchPlan:
    """
    A plan to fetch a specific component at a specific version.

    Captures all information needed to download, verify and place an artifact.
    """

    def __init__(
            self,
            component: str,
            version: str,
            download_url: str,
            checksum_url: str,
            target_filename: str,
            staging_path: pathlib.Path,
            final_path: pathlib.Path,
            status: str = FetchStatus.PENDING,
    ):
        """
        Initialize a fetch plan.

        Args:
            component: Name of the component
            version: Resolved version for this run
            download_url: Artifact URL, already transformed
            checksum_url: Checksum document URL, already transformed
            target_filename: Filename the checksum document refers to
            staging_path: Where the artifact is downloaded before verification
            final_path: Where the verified artifact is placed
            status: Current fetch status
        """
        self.component = component
        self.version = version
        self.download_url = download_url
        self.checksum_url = checksum_url
        self.target_filename = target_filename
        self.staging_path = staging_path
        self.final_path = final_path
        self.status = status
        self.error_message: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"FetchPlan(component={self.component}, version={self.version}, "
            f"status={self.status}, url={self.download_url})"
        )


class ComponentState:
    """
    Outcome of a component for the current run.
    """

    def __init__(
            self,
            component: str,
            status: str,
            version: Optional[str] = None,
            final_path: Optional[pathlib.Path] = None,
            error_message: Optional[str] = None,
    ):
        self.component = component
        self.status = status
        self.version = version
        self.final_path = final_path
        self.error_message = error_message

    def is_ok(self) -> bool:
        """Check if the component ended up with a verified artifact."""
        return self.status in (FetchStatus.DOWNLOADED, FetchStatus.SKIPPED)

    def __repr__(self) -> str:
        return (
            f"ComponentState(component={self.component}, "
            f"status={self.status}, version={self.version})"
        )


class FetchPlanManager:
    """
    Builds fetch plans from the component registry and records their outcomes.
    """

    def __init__(
        self,
        registry: ComponentRegistry,
        config: ClusterbinConfig,
        transform: Optional[UrlTransform] = None,
    ):
        """
        Initialize the fetch plan manager.

        Args:
            registry: The static component registry
            config: Configuration with directories and transport settings
            transform: Outbound URL transform, derived from config when omitted
        """
        self.registry = registry
        self.config = config
        self.transform = transform or config.url_transform()
        self.component_states: Dict[str, ComponentState] = {}

    def create_plan(
        self,
        descriptor: ComponentDescriptor,
        version: str,
        output_dir: Optional[pathlib.Path] = None,
    ) -> FetchPlan:
        """
        Create the fetch plan of a component for a resolved version.

        Args:
            descriptor: The component descriptor
            version: The resolved version
            output_dir: Directory of the final artifact, config.output_dir by default

        Returns:
            A pending FetchPlan
        """
        output_dir = pathlib.Path(output_dir or self.config.output_dir)
        download_url = self.transform(descriptor.download_url(version))
        checksum_url = self.transform(descriptor.checksum_url(version))

        return FetchPlan(
            component=descriptor.name,
            version=version,
            download_url=download_url,
            checksum_url=checksum_url,
            target_filename=descriptor.target_filename(version),
            staging_path=self.config.staging_dir / HttpUtils.filename_from_url(download_url),
            final_path=output_dir / descriptor.final_filename(version),
        )

    def requested_components(self) -> List[str]:
        """Components to process, in order."""
        return list(self.config.components) or self.registry.names()

    def mark_completed(self, plan: FetchPlan, status: str) -> None:
        """
        Record the final status of a plan.

        Args:
            plan: The fetch plan to mark
            status: FetchStatus.DOWNLOADED, SKIPPED or FAILED
        """
        plan.status = status
        self.component_states[plan.component] = ComponentState(
            component=plan.component,
            status=status,
            version=plan.version,
            final_path=plan.final_path if status != FetchStatus.FAILED else None,
            error_message=plan.error_message,
        )

    def mark_failed(self, component: str, error_message: str, version: Optional[str] = None) -> None:
        """Record a component that failed before a plan could be built."""
        self.component_states[component] = ComponentState(
            component=component,
            status=FetchStatus.FAILED,
            version=version,
            error_message=error_message,
        )

    def get_component_states(self) -> Dict[str, ComponentState]:
        return self.component_states

    def get_component_state(self, component: str) -> Optional[ComponentState]:
        return self.component_states.get(component)
