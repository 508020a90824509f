# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Container runtime adapters implementing ContainerRuntimePort."""

from .docker_runtime import DockerRuntimeAdapter, classify_docker_error

__all__ = [
    "DockerRuntimeAdapter",
    "classify_docker_error",
]
