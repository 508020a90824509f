# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Profile registry port: read access to declared profiles."""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from statkit.domain.entities import ProfileConfig


@runtime_checkable
class ProfileRegistryPort(Protocol):
    """Protocol for profile configuration sources."""

    def get_all(self) -> List[ProfileConfig]:
        """Return every declared profile."""
        ...

    def get_by_name(self, name: str) -> ProfileConfig:
        """Return the named profile.

        Raises:
            ProfileNotFoundError: If no profile with that name is declared.
        """
        ...
