# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Domain entities: core business objects for StatKit.

All entities are plain Python dataclasses with NO external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional


@dataclass(frozen=True)
class ProfileConfig:
    """Declared configuration of one compute backend profile.

    The profile name doubles as the container name and the connection
    target, so it must be unique within a registry.

    Attributes:
        name: Unique profile name.
        image: Container image reference, or None if not configured.
        port: Host port bound to the backend's internal port.
        environment: Name of the package/option environment of the profile.
        options: Backend options set for this profile.
        whitelist: Packages initially allowed in this profile.
    """

    name: str
    image: Optional[str] = None
    port: int = 6311
    environment: str = "default"
    options: Dict[str, str] = field(default_factory=dict, hash=False, compare=False)
    whitelist: FrozenSet[str] = field(default_factory=frozenset)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dictionary."""
        return {
            "name": self.name,
            "image": self.image,
            "port": self.port,
            "environment": self.environment,
            "options": dict(self.options),
            "whitelist": sorted(self.whitelist),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProfileConfig":
        """Create a profile config from a dictionary.

        Raises:
            KeyError: If ``name`` is missing.
        """
        return cls(
            name=data["name"],
            image=data.get("image"),
            port=int(data.get("port", 6311)),
            environment=data.get("environment", "default"),
            options={str(k): str(v) for k, v in (data.get("options") or {}).items()},
            whitelist=frozenset(data.get("whitelist") or ()),
        )
