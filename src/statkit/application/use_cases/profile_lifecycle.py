# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Use case: reconcile declared profiles with container runtime state.

A profile's container is named after the profile. Status is re-read from
the runtime on every query; nothing is cached client-side.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from statkit.application.dto import ContainerSpecDTO
from statkit.application.ports.registry_port import ProfileRegistryPort
from statkit.application.ports.runtime_port import ContainerRuntimePort
from statkit.config import DockerConfig
from statkit.domain.entities import ProfileConfig
from statkit.domain.exceptions import (
    ContainerNotFoundError,
    ContainerRuntimeError,
    ImagePullFailedError,
    ImageStartFailedError,
    MissingImageError,
    RuntimeUnavailableError,
)
from statkit.domain.value_objects import ProfileStatus, RemovalOutcome

logger = logging.getLogger(__name__)


class ProfileLifecycleManager:
    """Starts, stops and reports on profile containers.

    Args:
        runtime: Container runtime adapter.
        registry: Source of declared profile configurations.
        config: Runtime settings (pull timeout, internal port, env flags).
    """

    def __init__(
        self,
        runtime: ContainerRuntimePort,
        registry: ProfileRegistryPort,
        config: Optional[DockerConfig] = None,
    ) -> None:
        self._runtime = runtime
        self._registry = registry
        self._config = config or DockerConfig()
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, name: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(name, threading.Lock())

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_all_statuses(self) -> Dict[str, ProfileStatus]:
        """Return the status of every declared profile.

        Profiles without a container are NOT_FOUND. If the runtime cannot
        be reached at all, every profile is DOCKER_OFFLINE.
        """
        names = [profile.name for profile in self._registry.get_all()]
        statuses = {name: ProfileStatus.NOT_FOUND for name in names}
        if not names:
            return statuses

        try:
            containers = self._runtime.list_containers(names)
        except RuntimeUnavailableError as exc:
            logger.warning("Container runtime unreachable: %s", exc)
            return {name: ProfileStatus.DOCKER_OFFLINE for name in names}

        for container in containers:
            # The runtime's name filter is a substring match
            if container.name in statuses:
                statuses[container.name] = ProfileStatus.of_docker_status(container.state)
        return statuses

    def get_status(self, name: str) -> ProfileStatus:
        """Return the status of one declared profile.

        Raises:
            ProfileNotFoundError: If ``name`` is not declared.
        """
        self._registry.get_by_name(name)
        try:
            return ProfileStatus.of_docker_status(self._runtime.get_state(name))
        except ContainerNotFoundError:
            return ProfileStatus.NOT_FOUND
        except RuntimeUnavailableError as exc:
            logger.warning("Container runtime unreachable: %s", exc)
            return ProfileStatus.DOCKER_OFFLINE

    # ------------------------------------------------------------------
    # Start / remove
    # ------------------------------------------------------------------

    def start(self, name: str, cancel_event: Optional[threading.Event] = None) -> None:
        """(Re)start the container of a profile.

        Pulls the image, removes any previous container of the profile and
        starts a fresh one. Concurrent starts of one profile are serialized.

        Args:
            name: Profile name.
            cancel_event: Optional event that stops waiting for the pull.

        Raises:
            ProfileNotFoundError: If ``name`` is not declared.
            MissingImageError: If the profile has no image.
            ImagePullFailedError: If the pull fails, times out or is cancelled.
            ImageStartFailedError: If the new container cannot be started.
        """
        profile = self._registry.get_by_name(name)
        with self._lock_for(name):
            logger.info("Starting profile '%s'", name)
            self._pull_image(profile, cancel_event)
            self._remove_container(name)
            self._start_container(profile)
            logger.info("Profile '%s' started on port %d", name, profile.port)

    def remove(self, name: str) -> None:
        """Stop and remove a profile's container; a missing one is fine.

        Raises:
            ProfileNotFoundError: If ``name`` is not declared.
        """
        self._registry.get_by_name(name)
        with self._lock_for(name):
            self._remove_container(name)

    def _pull_image(
        self,
        profile: ProfileConfig,
        cancel_event: Optional[threading.Event],
    ) -> None:
        if profile.image is None:
            raise MissingImageError(profile.name)

        logger.info("Pulling image '%s'", profile.image)
        try:
            self._runtime.pull_image(
                profile.image,
                timeout=self._config.pull_timeout,
                cancel_event=cancel_event,
            )
        except ContainerRuntimeError as exc:
            raise ImagePullFailedError(profile.image, str(exc)) from exc

    def _remove_container(self, name: str) -> RemovalOutcome:
        try:
            self._runtime.stop_container(name)
            self._runtime.remove_container(name)
        except ContainerNotFoundError:
            logger.debug("No container for profile '%s' to remove", name)
            return RemovalOutcome.ALREADY_ABSENT
        logger.info("Removed container of profile '%s'", name)
        return RemovalOutcome.REMOVED

    def _start_container(self, profile: ProfileConfig) -> None:
        if profile.image is None:
            raise MissingImageError(profile.name)

        spec = ContainerSpecDTO(
            name=profile.name,
            image=profile.image,
            internal_port=self._config.internal_port,
            host_port=profile.port,
            environment=dict(self._config.container_environment),
        )
        try:
            self._runtime.run_container(spec)
        except ContainerRuntimeError as exc:
            raise ImageStartFailedError(profile.image, str(exc)) from exc
