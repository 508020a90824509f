# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""
StatKit: provisioning and driving statistical-compute backends

Each profile is a containerized R backend reachable over Rserve. StatKit
starts and stops those containers and runs workspace, data and package
operations against them over a single connection per profile.
"""

from .config import (
    StatKitConfig,
    DockerConfig,
    BridgeConfig,
    ConnectionConfig,
    MonitoringConfig,
    get_default_config,
    set_default_config,
)
from .domain import (
    ProfileConfig,
    ProfileStatus,
    PackageReference,
    AnonymousPrincipal,
    TokenPrincipal,
    StatKitError,
    ConfigurationError,
    ProfileNotFoundError,
    MissingImageError,
    ProvisioningError,
    ImagePullFailedError,
    ImageStartFailedError,
    ContainerRuntimeError,
    RServerError,
    ConnectionFailedError,
    ExecutionError,
    PackageInstallFailedError,
    InvalidPackageError,
    TokenRequiredError,
)
from .application.use_cases import (
    RExecutionBridge,
    ProfileLifecycleManager,
    ProfileSessionRegistry,
    BackendCommands,
)
from .api import StatKitServices, create_lifecycle_manager, create_services
from .log import configure_logging

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "StatKitConfig",
    "DockerConfig",
    "BridgeConfig",
    "ConnectionConfig",
    "MonitoringConfig",
    "get_default_config",
    "set_default_config",
    "configure_logging",
    # Domain
    "ProfileConfig",
    "ProfileStatus",
    "PackageReference",
    "AnonymousPrincipal",
    "TokenPrincipal",
    # Errors
    "StatKitError",
    "ConfigurationError",
    "ProfileNotFoundError",
    "MissingImageError",
    "ProvisioningError",
    "ImagePullFailedError",
    "ImageStartFailedError",
    "ContainerRuntimeError",
    "RServerError",
    "ConnectionFailedError",
    "ExecutionError",
    "PackageInstallFailedError",
    "InvalidPackageError",
    "TokenRequiredError",
    # Services
    "RExecutionBridge",
    "ProfileLifecycleManager",
    "ProfileSessionRegistry",
    "BackendCommands",
    "StatKitServices",
    "create_lifecycle_manager",
    "create_services",
]
