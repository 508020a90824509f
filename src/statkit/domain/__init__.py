# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Domain layer: entities, value objects and exceptions.

Nothing in this package imports from the application or infrastructure
layers, nor from any third-party library.
"""

from .entities import ProfileConfig
from .exceptions import (
    StatKitError,
    ConfigurationError,
    ProfileNotFoundError,
    MissingImageError,
    ProvisioningError,
    ImagePullFailedError,
    ImageStartFailedError,
    ContainerRuntimeError,
    ContainerNotFoundError,
    RuntimeUnavailableError,
    RServerError,
    ConnectionFailedError,
    ExecutionError,
    PackageInstallFailedError,
    InvalidPackageError,
    TokenRequiredError,
)
from .value_objects import (
    ProfileStatus,
    RemovalOutcome,
    PackageReference,
    AnonymousPrincipal,
    TokenPrincipal,
    flatten_filename,
    parse_package_options,
)

__all__ = [
    "ProfileConfig",
    "StatKitError",
    "ConfigurationError",
    "ProfileNotFoundError",
    "MissingImageError",
    "ProvisioningError",
    "ImagePullFailedError",
    "ImageStartFailedError",
    "ContainerRuntimeError",
    "ContainerNotFoundError",
    "RuntimeUnavailableError",
    "RServerError",
    "ConnectionFailedError",
    "ExecutionError",
    "PackageInstallFailedError",
    "InvalidPackageError",
    "TokenRequiredError",
    "ProfileStatus",
    "RemovalOutcome",
    "PackageReference",
    "AnonymousPrincipal",
    "TokenPrincipal",
    "flatten_filename",
    "parse_package_options",
]
