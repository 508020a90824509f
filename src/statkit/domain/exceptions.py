# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Domain exceptions: failure categories with no external dependencies.

These exceptions form a hierarchy rooted at ``StatKitError``. Errors raised
by infrastructure adapters (container runtime, backend connection) are
translated into this hierarchy at the adapter boundary so that application
code never has to know about client-library exception types.
"""

from __future__ import annotations


class StatKitError(Exception):
    """Base exception for all StatKit errors."""


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------


class ConfigurationError(StatKitError):
    """Raised when configuration is invalid or incomplete."""


class ProfileNotFoundError(ConfigurationError):
    """Raised when a profile name is not declared in the registry."""

    def __init__(self, profile_name: str) -> None:
        super().__init__(f"Profile '{profile_name}' does not exist")
        self.profile_name = profile_name


class MissingImageError(ConfigurationError):
    """Raised when a profile has no container image configured."""

    def __init__(self, profile_name: str) -> None:
        super().__init__(f"Profile '{profile_name}' has no image configured")
        self.profile_name = profile_name


# ---------------------------------------------------------------------------
# Provisioning errors
# ---------------------------------------------------------------------------


class ProvisioningError(StatKitError):
    """Raised when a profile container cannot be provisioned."""


class ImagePullFailedError(ProvisioningError):
    """Raised when pulling an image fails, times out or is interrupted."""

    def __init__(self, image: str, reason: str = "") -> None:
        message = f"Failed to pull image '{image}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.image = image


class ImageStartFailedError(ProvisioningError):
    """Raised when a container for an image cannot be created or started."""

    def __init__(self, image: str, reason: str = "") -> None:
        message = f"Failed to start image '{image}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.image = image


# ---------------------------------------------------------------------------
# Container runtime boundary
# ---------------------------------------------------------------------------


class ContainerRuntimeError(StatKitError):
    """Raised by a container runtime adapter for any runtime-side failure."""


class ContainerNotFoundError(ContainerRuntimeError):
    """Raised when the runtime reports that a container or image is absent."""


class RuntimeUnavailableError(ContainerRuntimeError):
    """Raised when the runtime transport itself cannot be reached."""


# ---------------------------------------------------------------------------
# Backend execution errors
# ---------------------------------------------------------------------------


class RServerError(StatKitError):
    """Raised by a backend connection when a protocol call fails."""


class ConnectionFailedError(StatKitError):
    """Raised when no connection to a backend could be established."""

    def __init__(self, profile_name: str, attempts: int) -> None:
        super().__init__(
            f"Could not connect to profile '{profile_name}' after {attempts} attempt(s)"
        )
        self.profile_name = profile_name
        self.attempts = attempts


class ExecutionError(StatKitError):
    """Raised when an operation against a backend fails."""


class PackageInstallFailedError(ExecutionError):
    """Raised when a package cannot be loaded after installation."""

    def __init__(self, package_name: str) -> None:
        super().__init__(f"Package '{package_name}' could not be loaded after installation")
        self.package_name = package_name


class InvalidPackageError(StatKitError):
    """Raised when a package filename is not an installable source archive."""

    def __init__(self, filename: str) -> None:
        super().__init__(f"'{filename}' is not a valid package archive (expected .tar.gz)")
        self.filename = filename


class TokenRequiredError(StatKitError):
    """Raised when an operation needs a bearer token the caller does not have."""

    def __init__(self, principal_name: str) -> None:
        super().__init__(f"Principal '{principal_name}' does not carry a bearer token")
        self.principal_name = principal_name
