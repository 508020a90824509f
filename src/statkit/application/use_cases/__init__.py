# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Application use cases orchestrating domain logic via ports."""

from .execution_bridge import RExecutionBridge
from .profile_lifecycle import ProfileLifecycleManager
from .sessions import ProfileSession, ProfileSessionRegistry
from .backend_commands import BackendCommands

__all__ = [
    "RExecutionBridge",
    "ProfileLifecycleManager",
    "ProfileSession",
    "ProfileSessionRegistry",
    "BackendCommands",
]
