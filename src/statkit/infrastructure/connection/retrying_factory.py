# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Connection factory retrying a backend connect call with backoff.

A freshly started container needs a moment before Rserve accepts
connections, so the first attempts usually fail with a refused socket.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from statkit.application.ports.connection_port import RConnection
from statkit.config import ConnectionConfig
from statkit.domain.entities import ProfileConfig
from statkit.domain.exceptions import ConnectionFailedError, RServerError

logger = logging.getLogger(__name__)

Connector = Callable[[ProfileConfig], RConnection]


class RetryingConnectionFactory:
    """ConnectionFactory with bounded exponential backoff.

    Args:
        connect: Opens a connection to a profile's backend; raises
            ``RServerError`` or ``OSError`` when the backend is not ready.
        profile: Profile to connect to.
        config: Retry budget and delays.
        sleep: Sleep function, replaceable in tests.
    """

    def __init__(
        self,
        connect: Connector,
        profile: ProfileConfig,
        config: Optional[ConnectionConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._connect = connect
        self._profile = profile
        self._config = config or ConnectionConfig()
        self._sleep = sleep

    def create_connection(self) -> RConnection:
        """Single connection attempt, without retry."""
        return self._connect(self._profile)

    def retry_create_connection(self) -> RConnection:
        attempts = max(1, self._config.max_attempts)
        delay = self._config.initial_delay
        for attempt in range(1, attempts + 1):
            try:
                connection = self.create_connection()
            except (RServerError, OSError) as exc:
                if attempt == attempts:
                    logger.error(
                        "Connecting to profile '%s' failed after %d attempt(s): %s",
                        self._profile.name,
                        attempts,
                        exc,
                    )
                    raise ConnectionFailedError(self._profile.name, attempts) from exc
                logger.debug(
                    "Connection attempt %d/%d to '%s' failed, retrying in %.1fs",
                    attempt,
                    attempts,
                    self._profile.name,
                    delay,
                )
                self._sleep(delay)
                delay = min(delay * self._config.backoff_factor, self._config.max_delay)
            else:
                if attempt > 1:
                    logger.info(
                        "Connected to profile '%s' after %d attempts", self._profile.name, attempt
                    )
                return connection
        raise ConnectionFailedError(self._profile.name, attempts)
