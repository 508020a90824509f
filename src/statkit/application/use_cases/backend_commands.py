# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Use case: run bridge operations against a named profile.

Each call borrows the profile's session connection for its whole duration,
so operations on one profile are serialized while different profiles run
independently.
"""

from __future__ import annotations

from typing import BinaryIO, Callable, Dict, Iterable, Optional, Set

from statkit.application.ports.connection_port import RServerResult
from statkit.application.ports.resource_port import ResourcePort
from statkit.application.use_cases.execution_bridge import Principal, RExecutionBridge
from statkit.application.use_cases.sessions import ProfileSessionRegistry


class BackendCommands:
    """Profile-addressed facade over :class:`RExecutionBridge`.

    Args:
        sessions: Session registry providing per-profile connections.
        bridge: Execution bridge; a default one is created if omitted.
    """

    def __init__(
        self,
        sessions: ProfileSessionRegistry,
        bridge: Optional[RExecutionBridge] = None,
    ) -> None:
        self._sessions = sessions
        self._bridge = bridge or RExecutionBridge()

    def evaluate(self, profile: str, command: str) -> RServerResult:
        with self._sessions.get(profile).connection() as connection:
            return self._bridge.execute(command, connection)

    def save_workspace(self, profile: str, sink: Callable[[BinaryIO], None]) -> None:
        with self._sessions.get(profile).connection() as connection:
            self._bridge.save_workspace(connection, sink)

    def load_workspace(
        self,
        profile: str,
        resource: ResourcePort,
        environment: str = ".GlobalEnv",
    ) -> None:
        with self._sessions.get(profile).connection() as connection:
            self._bridge.load_workspace(connection, resource, environment)

    def load_table(
        self,
        profile: str,
        resource: ResourcePort,
        filename: str,
        symbol: str,
        variables: Iterable[str] = (),
    ) -> None:
        with self._sessions.get(profile).connection() as connection:
            self._bridge.load_table(connection, resource, filename, symbol, variables)

    def load_resource(
        self,
        profile: str,
        principal: Principal,
        resource: ResourcePort,
        filename: str,
        symbol: str,
    ) -> None:
        with self._sessions.get(profile).connection() as connection:
            self._bridge.load_resource(principal, connection, resource, filename, symbol)

    def install_package(self, profile: str, resource: ResourcePort, filename: str) -> str:
        """Install a package and allow it in the profile.

        Returns:
            The logical name of the installed package.
        """
        session = self._sessions.get(profile)
        with session.connection() as connection:
            package_name = self._bridge.install_package(connection, resource, filename)
        session.add_to_whitelist(package_name)
        return package_name

    def get_whitelist(self, profile: str) -> Set[str]:
        return self._sessions.get(profile).whitelist

    def add_to_whitelist(self, profile: str, package_name: str) -> None:
        self._sessions.get(profile).add_to_whitelist(package_name)

    def get_options(self, profile: str) -> Dict[str, str]:
        """Effective backend options of a profile.

        Options declared by the installed packages, overridden by the
        options configured on the profile.
        """
        session = self._sessions.get(profile)
        with session.connection() as connection:
            options = self._bridge.get_installed_options(connection)
        options.update(session.profile.options)
        return options
