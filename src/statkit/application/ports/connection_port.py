# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Connection port: interface to one live statistical backend.

Connection implementations wrap a remote-evaluation client (e.g. an
Rserve client). They must raise
:class:`statkit.domain.exceptions.RServerError` for protocol failures.
"""

from __future__ import annotations

from typing import Any, BinaryIO, Optional, Protocol, runtime_checkable


@runtime_checkable
class RServerResult(Protocol):
    """Typed outcome of one remote evaluation."""

    def as_logical(self) -> bool:
        """Interpret the result as a single logical value."""
        ...

    def as_native(self) -> Any:
        """Convert the result to the closest Python value."""
        ...

    def is_error(self) -> bool:
        """Whether the result is a trapped error (``try-error``)."""
        ...


@runtime_checkable
class RConnection(Protocol):
    """Stateful, single-owner handle to one backend process.

    A connection must never be used by two operations concurrently:
    commands and file-transfer bytes share one protocol stream.
    """

    def eval(self, command: str) -> Optional[RServerResult]:
        """Evaluate a command in the backend's global environment.

        Args:
            command: Command text in the backend's language.

        Returns:
            The evaluation result; None signals a protocol violation.
        """
        ...

    def open_file(self, name: str) -> BinaryIO:
        """Open a file in the backend's working directory for reading."""
        ...

    def create_file(self, name: str) -> BinaryIO:
        """Create (or truncate) a file in the backend's working directory."""
        ...

    def close(self) -> None:
        """Close the connection."""
        ...


@runtime_checkable
class ConnectionFactory(Protocol):
    """Produces live connections to one profile's backend."""

    def retry_create_connection(self) -> RConnection:
        """Create a connection, retrying with bounded backoff.

        Raises:
            ConnectionFailedError: If the retry budget is exhausted.
        """
        ...
