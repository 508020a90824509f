# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Resource port: a readable source of bytes to push into a backend."""

from __future__ import annotations

from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class ResourcePort(Protocol):
    """Anything that can be opened as a binary stream.

    Each call to :meth:`open` returns a fresh stream the caller closes.
    """

    @property
    def name(self) -> str:
        ...

    def open(self) -> BinaryIO:
        ...
