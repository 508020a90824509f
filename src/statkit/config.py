# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Configuration management for StatKit."""

import os
import json
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from .domain.entities import ProfileConfig


# Port Rserve listens on inside every backend container
RSERVE_PORT = 6311


@dataclass
class DockerConfig:
    """Container runtime configuration."""

    base_url: Optional[str] = None  # None = DOCKER_HOST / local socket
    api_timeout: float = 30.0
    pull_timeout: float = 300.0
    stop_timeout: int = 10
    internal_port: int = RSERVE_PORT
    container_environment: Dict[str, str] = field(default_factory=lambda: {
        'DEBUG': 'FALSE',
    })

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            'base_url': self.base_url,
            'api_timeout': self.api_timeout,
            'pull_timeout': self.pull_timeout,
            'stop_timeout': self.stop_timeout,
            'internal_port': self.internal_port,
            'container_environment': dict(self.container_environment),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DockerConfig':
        """Create config from dictionary."""
        return cls(
            base_url=data.get('base_url'),
            api_timeout=data.get('api_timeout', 30.0),
            pull_timeout=data.get('pull_timeout', 300.0),
            stop_timeout=data.get('stop_timeout', 10),
            internal_port=data.get('internal_port', RSERVE_PORT),
            container_environment=data.get('container_environment', {'DEBUG': 'FALSE'}),
        )


@dataclass
class BridgeConfig:
    """Execution bridge configuration."""

    buffer_size: int = 65536
    workspace_file: str = '.RData'

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            'buffer_size': self.buffer_size,
            'workspace_file': self.workspace_file,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BridgeConfig':
        """Create config from dictionary."""
        return cls(
            buffer_size=data.get('buffer_size', 65536),
            workspace_file=data.get('workspace_file', '.RData'),
        )


@dataclass
class ConnectionConfig:
    """Backend connection retry configuration."""

    max_attempts: int = 10
    initial_delay: float = 0.5
    max_delay: float = 5.0
    backoff_factor: float = 1.5

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            'max_attempts': self.max_attempts,
            'initial_delay': self.initial_delay,
            'max_delay': self.max_delay,
            'backoff_factor': self.backoff_factor,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConnectionConfig':
        """Create config from dictionary."""
        return cls(
            max_attempts=data.get('max_attempts', 10),
            initial_delay=data.get('initial_delay', 0.5),
            max_delay=data.get('max_delay', 5.0),
            backoff_factor=data.get('backoff_factor', 1.5),
        )


@dataclass
class MonitoringConfig:
    """Logging configuration."""

    log_level: str = 'INFO'

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            'log_level': self.log_level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MonitoringConfig':
        """Create config from dictionary."""
        return cls(
            log_level=data.get('log_level', 'INFO'),
        )


class StatKitConfig:
    """Main StatKit configuration."""

    # Default config file locations (in priority order)
    CONFIG_SEARCH_PATHS = [
        './statkit_config.yaml',
        './statkit_config.json',
        '~/.statkit/config.yaml',
        '~/.statkit/config.json',
        '/etc/statkit/config.yaml',
        '/etc/statkit/config.json',
    ]

    def __init__(
        self,
        docker: Optional[DockerConfig] = None,
        bridge: Optional[BridgeConfig] = None,
        connection: Optional[ConnectionConfig] = None,
        monitoring: Optional[MonitoringConfig] = None,
        profiles: Optional[List[ProfileConfig]] = None,
    ):
        """
        Initialize StatKit configuration.

        Args:
            docker: Container runtime configuration
            bridge: Execution bridge configuration
            connection: Connection retry configuration
            monitoring: Logging configuration
            profiles: Declared backend profiles
        """
        self.docker = docker or DockerConfig()
        self.bridge = bridge or BridgeConfig()
        self.connection = connection or ConnectionConfig()
        self.monitoring = monitoring or MonitoringConfig()
        self.profiles = list(profiles or [])

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> 'StatKitConfig':
        """
        Load configuration from file.

        Search order:
        1. Explicit config_path parameter
        2. STATKIT_CONFIG_PATH environment variable
        3. Default search paths (project, user home, system)

        Args:
            config_path: Optional explicit path to config file

        Returns:
            StatKitConfig instance
        """
        if config_path:
            return cls._load_from_file(config_path)

        env_path = os.getenv('STATKIT_CONFIG_PATH')
        if env_path and Path(env_path).exists():
            return cls._load_from_file(env_path)

        for path_str in cls.CONFIG_SEARCH_PATHS:
            path = Path(path_str).expanduser()
            if path.exists():
                return cls._load_from_file(str(path))

        # No config file found, use defaults
        return cls()

    @classmethod
    def _load_from_file(cls, filepath: str) -> 'StatKitConfig':
        """Load configuration from a specific file."""
        path = Path(filepath)

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {filepath}")

        with open(path, 'r') as f:
            content = f.read()

        if path.suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(content)
        elif path.suffix == '.json':
            data = json.loads(content)
        else:
            raise ValueError(f"Unsupported config format: {path.suffix}")

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StatKitConfig':
        """Create config from dictionary."""
        return cls(
            docker=DockerConfig.from_dict(data.get('docker', {})),
            bridge=BridgeConfig.from_dict(data.get('bridge', {})),
            connection=ConnectionConfig.from_dict(data.get('connection', {})),
            monitoring=MonitoringConfig.from_dict(data.get('monitoring', {})),
            profiles=[ProfileConfig.from_dict(p) for p in data.get('profiles', [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            'docker': self.docker.to_dict(),
            'bridge': self.bridge.to_dict(),
            'connection': self.connection.to_dict(),
            'monitoring': self.monitoring.to_dict(),
            'profiles': [p.to_dict() for p in self.profiles],
        }

    def save(self, filepath: str) -> None:
        """
        Save configuration to file.

        Args:
            filepath: Path to save config file
        """
        path = Path(filepath)
        data = self.to_dict()

        if path.suffix in ['.yaml', '.yml']:
            with open(path, 'w') as f:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        elif path.suffix == '.json':
            with open(path, 'w') as f:
                json.dump(data, f, indent=2)
        else:
            raise ValueError(f"Unsupported config format: {path.suffix}")


# Global default configuration instance
_default_config: Optional[StatKitConfig] = None


def get_default_config() -> StatKitConfig:
    """
    Get the default configuration instance.

    Lazily loads configuration on first access.

    Returns:
        StatKitConfig instance
    """
    global _default_config
    if _default_config is None:
        _default_config = StatKitConfig.load()
    return _default_config


def set_default_config(config: StatKitConfig) -> None:
    """
    Set the default configuration instance.

    Args:
        config: StatKitConfig to use as default
    """
    global _default_config
    _default_config = config
