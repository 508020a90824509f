# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Configuration-backed adapters."""

from .profile_registry import InMemoryProfileRegistry

__all__ = ["InMemoryProfileRegistry"]
