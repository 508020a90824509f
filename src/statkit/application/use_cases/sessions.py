# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Per-profile sessions: one connection, one lock, one package whitelist.

Sessions are created on first use and kept for the lifetime of the
registry. A session's connection is only reachable while its lock is held,
so two operations never share a connection concurrently.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional, Set

from statkit.application.ports.connection_port import ConnectionFactory, RConnection
from statkit.application.ports.registry_port import ProfileRegistryPort
from statkit.domain.entities import ProfileConfig
from statkit.domain.exceptions import ExecutionError, RServerError

logger = logging.getLogger(__name__)

FactoryBuilder = Callable[[ProfileConfig], ConnectionFactory]


class ProfileSession:
    """Connection and mutable runtime state of one profile.

    Args:
        profile: The profile's configuration.
        factory: Factory used to (re)create the backend connection.
    """

    def __init__(self, profile: ProfileConfig, factory: ConnectionFactory) -> None:
        self.profile = profile
        self._factory = factory
        self._lock = threading.RLock()
        self._connection: Optional[RConnection] = None
        self._whitelist: Set[str] = set(profile.whitelist)
        self._whitelist_lock = threading.Lock()

    @property
    def name(self) -> str:
        return self.profile.name

    @contextmanager
    def connection(self) -> Iterator[RConnection]:
        """Hold the session lock and yield its (lazily created) connection.

        Failed evaluations leave the connection in place. A transfer that
        broke on I/O may have left partial bytes on the stream, so that
        connection is closed and the next block reconnects.

        Raises:
            ConnectionFailedError: If no connection can be established.
        """
        with self._lock:
            if self._connection is None:
                logger.debug("Opening connection to profile '%s'", self.name)
                self._connection = self._factory.retry_create_connection()
            try:
                yield self._connection
            except ExecutionError as exc:
                if isinstance(exc.__cause__, OSError):
                    self._discard()
                raise

    def close(self) -> None:
        """Close the connection, if one is open."""
        with self._lock:
            self._discard()

    def _discard(self) -> None:
        connection, self._connection = self._connection, None
        if connection is None:
            return
        try:
            connection.close()
        except RServerError as exc:
            logger.warning("Closing connection to profile '%s' failed: %s", self.name, exc)

    @property
    def whitelist(self) -> Set[str]:
        """Packages currently allowed in this profile (a copy)."""
        with self._whitelist_lock:
            return set(self._whitelist)

    def add_to_whitelist(self, package_name: str) -> None:
        with self._whitelist_lock:
            self._whitelist.add(package_name)
        logger.info("Added '%s' to whitelist of profile '%s'", package_name, self.name)


class ProfileSessionRegistry:
    """Explicit registry of sessions keyed by profile name.

    Args:
        registry: Source of declared profile configurations.
        factory_builder: Builds a connection factory for a profile.
    """

    def __init__(
        self,
        registry: ProfileRegistryPort,
        factory_builder: FactoryBuilder,
    ) -> None:
        self._registry = registry
        self._factory_builder = factory_builder
        self._sessions: Dict[str, ProfileSession] = {}
        self._guard = threading.Lock()

    def get(self, name: str) -> ProfileSession:
        """Return the session of a profile, creating it on first use.

        Raises:
            ProfileNotFoundError: If ``name`` is not declared.
        """
        with self._guard:
            session = self._sessions.get(name)
            if session is None:
                profile = self._registry.get_by_name(name)
                session = ProfileSession(profile, self._factory_builder(profile))
                self._sessions[name] = session
            return session

    def disconnect(self, name: str) -> None:
        """Close a profile's connection but keep its session state."""
        with self._guard:
            session = self._sessions.get(name)
        if session is not None:
            session.close()

    def close(self, name: str) -> None:
        """Close and forget the session of a profile, if any."""
        with self._guard:
            session = self._sessions.pop(name, None)
        if session is not None:
            session.close()

    def close_all(self) -> None:
        with self._guard:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close()
