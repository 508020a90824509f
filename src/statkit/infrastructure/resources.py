# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Resource adapters: byte sources pushed into backends."""

from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO, Union


class BytesResource:
    """Resource over an in-memory payload (e.g. an uploaded file)."""

    def __init__(self, data: bytes, name: str = "bytes") -> None:
        self._data = data
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def open(self) -> BinaryIO:
        return io.BytesIO(self._data)

    def __len__(self) -> int:
        return len(self._data)


class FileResource:
    """Resource over a file on the local filesystem."""

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> BinaryIO:
        return open(self._path, "rb")
