# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Unified high-level API for StatKit.

Wires configuration, the Docker adapter, the profile registry and the
session registry into ready-to-use services. Under the hood these delegate
to the use cases (``ProfileLifecycleManager``, ``BackendCommands``).
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

from statkit.application.use_cases.backend_commands import BackendCommands
from statkit.application.use_cases.execution_bridge import RExecutionBridge
from statkit.application.use_cases.profile_lifecycle import ProfileLifecycleManager
from statkit.application.use_cases.sessions import ProfileSessionRegistry
from statkit.config import StatKitConfig, get_default_config
from statkit.domain.entities import ProfileConfig
from statkit.infrastructure.config.profile_registry import InMemoryProfileRegistry
from statkit.infrastructure.connection.retrying_factory import Connector, RetryingConnectionFactory
from statkit.infrastructure.runtime.docker_runtime import DockerRuntimeAdapter


@dataclass
class StatKitServices:
    """Services built from one configuration."""

    config: StatKitConfig
    registry: InMemoryProfileRegistry
    lifecycle: ProfileLifecycleManager
    sessions: ProfileSessionRegistry
    commands: BackendCommands

    def start(self, name: str, cancel_event: Optional[threading.Event] = None) -> None:
        """(Re)start a profile and close its session's connection.

        The next command on the profile connects to the new container.
        """
        try:
            self.lifecycle.start(name, cancel_event=cancel_event)
        finally:
            self.sessions.disconnect(name)

    def remove(self, name: str) -> None:
        """Remove a profile's container and close its session's connection."""
        try:
            self.lifecycle.remove(name)
        finally:
            self.sessions.disconnect(name)

    def close(self) -> None:
        """Close every open backend connection."""
        self.sessions.close_all()


def create_lifecycle_manager(
    config: Optional[StatKitConfig] = None,
    registry: Optional[InMemoryProfileRegistry] = None,
) -> ProfileLifecycleManager:
    """Build a lifecycle manager talking to the configured Docker daemon."""
    config = config or get_default_config()
    registry = registry or InMemoryProfileRegistry.from_config(config)
    return ProfileLifecycleManager(DockerRuntimeAdapter(config.docker), registry, config.docker)


def create_services(
    connect: Connector,
    config: Optional[StatKitConfig] = None,
) -> StatKitServices:
    """Build all StatKit services.

    Args:
        connect: Opens a connection to a profile's backend (for instance an
            Rserve client bound to ``localhost:<profile.port>``).
        config: Configuration; the default configuration if omitted.

    Returns:
        :class:`StatKitServices` sharing one registry and one Docker adapter.
    """
    config = config or get_default_config()
    registry = InMemoryProfileRegistry.from_config(config)

    def factory_builder(profile: ProfileConfig) -> RetryingConnectionFactory:
        return RetryingConnectionFactory(connect, profile, config.connection)

    sessions = ProfileSessionRegistry(registry, factory_builder)
    return StatKitServices(
        config=config,
        registry=registry,
        lifecycle=create_lifecycle_manager(config, registry),
        sessions=sessions,
        commands=BackendCommands(sessions, RExecutionBridge(config.bridge)),
    )
