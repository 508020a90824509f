# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Data Transfer Objects for crossing layer boundaries.

DTOs are simple dataclasses used to pass data between the application
layer and infrastructure adapters without leaking client-library types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class ContainerInfoDTO:
    """A container as reported by the container runtime.

    Attributes:
        name: Container name with any runtime-imposed leading '/' removed.
        state: Native runtime state string (e.g. "running", "exited").
    """

    name: str
    state: str


@dataclass
class ContainerSpecDTO:
    """Everything needed to create and start a profile container.

    Attributes:
        name: Container name (equal to the profile name).
        image: Image reference to run.
        internal_port: Backend port inside the container.
        host_port: Host port the internal port is published on.
        environment: Environment variables passed to the container.
    """

    name: str
    image: str
    internal_port: int
    host_port: int
    environment: Dict[str, str] = field(default_factory=dict)


@dataclass
class TransferStatsDTO:
    """Statistics of one file transfer to a backend.

    Attributes:
        remote_name: Destination filename on the backend.
        size_bytes: Number of bytes copied.
        elapsed_us: Wall-clock duration in microseconds.
    """

    remote_name: str
    size_bytes: int
    elapsed_us: int

    @property
    def megabytes_per_second(self) -> float:
        """Throughput; bytes per microsecond equals megabytes per second."""
        if self.elapsed_us <= 0:
            return 0.0
        return self.size_bytes / self.elapsed_us
