# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Application layer: use cases and port interfaces.

This layer depends only on the domain layer. It defines port protocols
(interfaces) that infrastructure adapters must implement, and use cases
that orchestrate domain logic through those ports.
"""

from .dto import (
    ContainerInfoDTO,
    ContainerSpecDTO,
    TransferStatsDTO,
)

__all__ = [
    "ContainerInfoDTO",
    "ContainerSpecDTO",
    "TransferStatsDTO",
]
