# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Container runtime port: interface to the engine that runs profiles.

Adapters translate their client library's errors into the runtime
categories of :mod:`statkit.domain.exceptions`:

- ``ContainerNotFoundError`` when a container or image does not exist,
- ``RuntimeUnavailableError`` when the runtime cannot be reached,
- ``ContainerRuntimeError`` for anything else the runtime reports.
"""

from __future__ import annotations

import threading
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from statkit.application.dto import ContainerInfoDTO, ContainerSpecDTO


@runtime_checkable
class ContainerRuntimePort(Protocol):
    """Protocol for container runtime adapters."""

    def list_containers(self, names: Sequence[str]) -> List[ContainerInfoDTO]:
        """List containers (running or not) whose name may match ``names``.

        The runtime's name filter may be fuzzy; callers match exactly.
        """
        ...

    def get_state(self, name: str) -> str:
        """Return the native state string of the named container."""
        ...

    def pull_image(
        self,
        image: str,
        timeout: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """Pull an image, waiting at most ``timeout`` seconds.

        Raises:
            ContainerRuntimeError: If the pull fails, times out or is
                interrupted through ``cancel_event``.
        """
        ...

    def stop_container(self, name: str) -> None:
        """Stop the named container."""
        ...

    def remove_container(self, name: str) -> None:
        """Remove the named container."""
        ...

    def run_container(self, spec: ContainerSpecDTO) -> str:
        """Create and start a container, returning its id."""
        ...
