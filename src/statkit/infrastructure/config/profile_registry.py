# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""In-memory profile registry built from StatKit configuration."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from statkit.config import StatKitConfig
from statkit.domain.entities import ProfileConfig
from statkit.domain.exceptions import ConfigurationError, ProfileNotFoundError


class InMemoryProfileRegistry:
    """ProfileRegistryPort over a fixed set of profiles.

    Profiles are read-only after construction and safe to share between
    threads without locking.

    Args:
        profiles: Declared profiles; names must be unique.

    Raises:
        ConfigurationError: If two profiles share a name.
    """

    def __init__(self, profiles: Iterable[ProfileConfig]) -> None:
        self._profiles: Dict[str, ProfileConfig] = {}
        for profile in profiles:
            if profile.name in self._profiles:
                raise ConfigurationError(f"Duplicate profile name: '{profile.name}'")
            self._profiles[profile.name] = profile

    @classmethod
    def from_config(cls, config: Optional[StatKitConfig] = None) -> "InMemoryProfileRegistry":
        """Build a registry from the ``profiles`` section of a config."""
        config = config or StatKitConfig.load()
        return cls(config.profiles)

    def get_all(self) -> List[ProfileConfig]:
        return list(self._profiles.values())

    def get_by_name(self, name: str) -> ProfileConfig:
        try:
            return self._profiles[name]
        except KeyError:
            raise ProfileNotFoundError(name) from None
