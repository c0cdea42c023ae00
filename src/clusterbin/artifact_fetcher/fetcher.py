"""
Artifact fetcher implementation.

Resolves, downloads, verifies and places component artifacts, one component
at a time.
"""

import logging
import pathlib
from typing import Dict, List, Optional

import requests

from clusterbin.checksum_retriever import ChecksumRetriever
from clusterbin.clusterbin_config import ClusterbinConfig
from clusterbin.clusterbin_exceptions import (
    ClusterbinException,
    FilesystemError,
    HashRetrievalError,
    IntegrityError,
)
from clusterbin.clusterbin_logger import ClusterbinLogger
from clusterbin.clusterbin_utils import FileUtils, HttpUtils
from clusterbin.component_models import ComponentDescriptor, ComponentRegistry
from clusterbin.fetch_plan import ComponentState, FetchPlan, FetchPlanManager, FetchStatus
from clusterbin.release_resolver import VersionResolver


class ArtifactFetcher:
    """
    Fetches and verifies component artifacts.

    Resolves versions, executes fetch plans and records component states.
    A failing component never stops the remaining ones.
    """

    def __init__(
        self,
        config: ClusterbinConfig,
        logger: ClusterbinLogger,
        registry: Optional[ComponentRegistry] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the artifact fetcher.

        Args:
            config: Transport and filesystem configuration
            logger: Logger for progress and error messages
            registry: Component registry, the bundled one by default
            session: HTTP session, built from config by default
        """
        self.config = config
        self.logger = logger
        self.registry = registry or ComponentRegistry.default()
        transform = config.url_transform()
        self.http = HttpUtils(session or config.build_session(), logger, config.timeout)
        self.resolver = VersionResolver(self.http, logger, transform)
        self.checksums = ChecksumRetriever(self.http, logger)
        self.plan_manager = FetchPlanManager(self.registry, config, transform)

    def fetch_all(self, components: Optional[List[str]] = None) -> bool:
        """
        Fetch every requested component sequentially.

        Args:
            components: Component names, config.components or the whole registry by default

        Returns:
            True if no component failed, False otherwise
        """
        names = components or self.plan_manager.requested_components()

        self.logger.log(f"Fetching {len(names)} components", logging.INFO)

        all_succeeded = True
        for name in names:
            state = self.fetch_component(name)
            if not state.is_ok():
                all_succeeded = False

        return all_succeeded

    def fetch_component(self, name: str) -> ComponentState:
        """
        Resolve and fetch a single component, recording its state.

        Args:
            name: The component name

        Returns:
            The ComponentState of the component for this run
        """
        try:
            descriptor = self.registry.lookup(name)
            version = self.resolver.resolve(descriptor.version_url)
        except ClusterbinException as e:
            error_msg = f"Failed to get latest version for {name}: {e}"
            self.logger.log(error_msg, logging.ERROR)
            self.plan_manager.mark_failed(name, error_msg)
            return self.plan_manager.get_component_state(name)

        plan = self.plan_manager.create_plan(descriptor, version)
        self.logger.log(f"{name} {version}: {plan.download_url}", logging.INFO)

        try:
            status = self.execute_plan(plan)
        except Exception as e:
            plan.error_message = f"Failed to fetch {name} {version}: {e}"
            self.logger.log(plan.error_message, logging.ERROR)
            self.plan_manager.mark_completed(plan, FetchStatus.FAILED)
            return self.plan_manager.get_component_state(name)

        if status == FetchStatus.SKIPPED:
            self.logger.log(f"{name} {version}: already up to date", logging.INFO)
        else:
            self.logger.log(f"{name} {version}: downloaded to {plan.final_path}", logging.INFO)
        self.plan_manager.mark_completed(plan, status)
        return self.plan_manager.get_component_state(name)

    def process_component(
        self,
        descriptor: ComponentDescriptor,
        version: str,
        output_dir: Optional[pathlib.Path] = None,
    ) -> str:
        """
        Fetch, verify and place one component at an already resolved version.

        Returns:
            FetchStatus.DOWNLOADED or FetchStatus.SKIPPED

        Raises:
            ClusterbinException: A subclass describing the failed step
        """
        plan = self.plan_manager.create_plan(descriptor, version, output_dir)
        return self.execute_plan(plan)

    def execute_plan(self, plan: FetchPlan) -> str:
        """
        Execute a fetch plan. Nothing is written to the final path unless the
        downloaded artifact matches the expected hash.
        """
        plan.status = FetchStatus.IN_PROGRESS

        try:
            expected_hash = self.checksums.fetch_hash(plan.checksum_url, plan.target_filename)
        except ClusterbinException as e:
            raise HashRetrievalError(f"failed to get remote hash: {e}") from e

        if FileUtils.is_up_to_date(plan.final_path, expected_hash):
            return FetchStatus.SKIPPED

        try:
            plan.staging_path.parent.mkdir(parents=True, exist_ok=True)
            plan.final_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"failed to create directories: {e}") from e

        self.http.download_file(plan.download_url, plan.staging_path)

        try:
            actual_hash = FileUtils.sha256_of_file(plan.staging_path)
        except OSError as e:
            FileUtils.remove_quietly(plan.staging_path)
            raise FilesystemError(f"failed to calculate hash of {plan.staging_path}: {e}") from e

        if actual_hash != expected_hash:
            FileUtils.remove_quietly(plan.staging_path)
            raise IntegrityError(expected_hash, actual_hash)

        if not FileUtils.place_file(plan.staging_path, plan.final_path):
            self.logger.log(
                f"Placed {plan.final_path} but could not remove staged file {plan.staging_path}",
                logging.WARNING,
            )
        return FetchStatus.DOWNLOADED

    def get_failed_components(self) -> Dict[str, ComponentState]:
        """
        Get information about all failed components.

        Returns:
            Dictionary mapping component names to their states
        """
        states = self.plan_manager.get_component_states()
        return {
            name: state
            for name, state in states.items()
            if state.status == FetchStatus.FAILED
        }

    def get_download_summary(self) -> dict:
        """
        Get a summary of the run.

        Returns:
            Dictionary with counts of downloaded, skipped and failed components
        """
        states = self.plan_manager.get_component_states()

        downloaded = sum(1 for s in states.values() if s.status == FetchStatus.DOWNLOADED)
        skipped = sum(1 for s in states.values() if s.status == FetchStatus.SKIPPED)
        failed = sum(1 for s in states.values() if s.status == FetchStatus.FAILED)

        return {
            "downloaded": downloaded,
            "skipped": skipped,
            "failed": failed,
            "total": downloaded + skipped + failed,
        }
