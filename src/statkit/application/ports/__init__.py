# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Port interfaces (Protocol classes) for dependency inversion.

Ports define the contracts that infrastructure adapters must satisfy.
They depend only on the domain layer and DTOs.
"""

from .connection_port import RServerResult, RConnection, ConnectionFactory
from .registry_port import ProfileRegistryPort
from .resource_port import ResourcePort
from .runtime_port import ContainerRuntimePort

__all__ = [
    "RServerResult",
    "RConnection",
    "ConnectionFactory",
    "ProfileRegistryPort",
    "ResourcePort",
    "ContainerRuntimePort",
]
