# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Backend connection factories."""

from .retrying_factory import RetryingConnectionFactory

__all__ = ["RetryingConnectionFactory"]
