# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Domain value objects: immutable types with no external dependencies.

Value objects are distinguished from entities by having no identity --
two value objects with the same fields are considered equal.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .exceptions import InvalidPackageError


class ProfileStatus(str, Enum):
    """Runtime state of a profile's container.

    Derived from the container runtime on every query, never persisted.
    """

    RUNNING = "RUNNING"
    STOPPED = "STOPPED"
    CREATED = "CREATED"
    RESTARTING = "RESTARTING"
    PAUSED = "PAUSED"
    REMOVING = "REMOVING"
    DEAD = "DEAD"
    NOT_FOUND = "NOT_FOUND"
    DOCKER_OFFLINE = "DOCKER_OFFLINE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def of_docker_status(cls, state: Optional[str]) -> "ProfileStatus":
        """Translate a Docker container state string into a ProfileStatus.

        Args:
            state: Native state reported by Docker (e.g. "running", "exited").

        Returns:
            The matching ProfileStatus, or UNKNOWN for unrecognized states.
        """
        if not state:
            return cls.UNKNOWN
        return _DOCKER_STATES.get(state.lower(), cls.UNKNOWN)


_DOCKER_STATES: Dict[str, ProfileStatus] = {
    "running": ProfileStatus.RUNNING,
    "exited": ProfileStatus.STOPPED,
    "created": ProfileStatus.CREATED,
    "restarting": ProfileStatus.RESTARTING,
    "paused": ProfileStatus.PAUSED,
    "removing": ProfileStatus.REMOVING,
    "dead": ProfileStatus.DEAD,
}


class RemovalOutcome(str, Enum):
    """Result of tearing down a profile container."""

    REMOVED = "removed"
    ALREADY_ABSENT = "already_absent"


PACKAGE_ARCHIVE_SUFFIX = ".tar.gz"

_VERSION_SUFFIX = re.compile(r"_[^_]+$")


@dataclass(frozen=True)
class PackageReference:
    """Filename of an installable package source archive.

    Archives follow the ``<name>_<version>.tar.gz`` naming convention.

    Attributes:
        filename: Archive filename as uploaded, possibly containing '/'.
    """

    filename: str

    def __post_init__(self) -> None:
        if not self.filename.endswith(PACKAGE_ARCHIVE_SUFFIX):
            raise InvalidPackageError(self.filename)

    @property
    def package_name(self) -> str:
        """Logical package name: the base filename minus its last '_' token."""
        basename = self.filename.rsplit("/", 1)[-1]
        return _VERSION_SUFFIX.sub("", basename, count=1)

    @property
    def remote_filename(self) -> str:
        """Flattened filename used in the backend's working directory."""
        return flatten_filename(self.filename)


def flatten_filename(filename: str) -> str:
    """Replace path separators so the file lands in the working directory."""
    return filename.replace("/", "_")


@dataclass(frozen=True)
class AnonymousPrincipal:
    """A caller identity that carries no bearer token.

    Attributes:
        name: Caller name, used in log and error messages.
    """

    name: str

    @property
    def token(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class TokenPrincipal:
    """A caller identity authenticated with a bearer token.

    Attributes:
        name: Caller name.
        token: Raw bearer token, forwarded to backend resource handles.
    """

    name: str
    token: str

    def __repr__(self) -> str:
        return f"TokenPrincipal(name={self.name!r}, token='***')"


def parse_package_options(field: str) -> Dict[str, str]:
    """Parse a package ``Options`` field into a mapping.

    The field holds comma separated ``key=value`` entries and may be
    wrapped over several lines. Entries without a key are skipped.

    >>> parse_package_options("datashield.privacyLevel=5, default.nfilter.tab=3")
    {'datashield.privacyLevel': '5', 'default.nfilter.tab': '3'}
    """
    options: Dict[str, str] = {}
    for entry in field.split(","):
        key, sep, value = entry.partition("=")
        key = key.strip()
        if sep and key:
            options[key] = value.strip()
    return options
