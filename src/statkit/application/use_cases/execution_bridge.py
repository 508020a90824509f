# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""Execution bridge: domain operations as remote calls on one connection.

Every operation runs as a strict sequence of evaluations and file
transfers over a single :class:`RConnection`. The bridge holds no
per-connection state; callers must not share a connection between
concurrent operations (see :mod:`statkit.application.use_cases.sessions`).
"""

from __future__ import annotations

import logging
import time
from typing import BinaryIO, Callable, Dict, Iterable, Optional, Union

from statkit.application import commands
from statkit.application.dto import TransferStatsDTO
from statkit.application.ports.connection_port import RConnection, RServerResult
from statkit.application.ports.resource_port import ResourcePort
from statkit.config import BridgeConfig
from statkit.domain.exceptions import (
    ExecutionError,
    PackageInstallFailedError,
    RServerError,
    TokenRequiredError,
)
from statkit.domain.value_objects import (
    AnonymousPrincipal,
    PackageReference,
    TokenPrincipal,
    flatten_filename,
    parse_package_options,
)

logger = logging.getLogger(__name__)

Principal = Union[TokenPrincipal, AnonymousPrincipal]

# Backend symbols used while building a resource client
_RDS_SYMBOL = "rds"
_RESOURCE_SYMBOL = "R"


def _display_size(size: int) -> str:
    """Human-readable byte count (e.g. '64 KB')."""
    for unit in ("bytes", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size} {unit}"
        size //= 1024
    return f"{size} GB"


class RExecutionBridge:
    """Translates workspace, data and package operations into R calls.

    Args:
        config: Bridge configuration (transfer buffer, workspace file).
    """

    def __init__(self, config: Optional[BridgeConfig] = None) -> None:
        self._config = config or BridgeConfig()

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def execute(self, command: str, connection: RConnection) -> RServerResult:
        """Evaluate a command inside an R ``try`` block.

        Errors raised by the command itself come back as a ``try-error``
        result instead of failing the call.

        Args:
            command: R command text.
            connection: Live backend connection.

        Returns:
            The evaluation result.

        Raises:
            ExecutionError: If the protocol call fails or returns nothing.
        """
        return self._evaluate(commands.trap(command), connection, display=command)

    def _evaluate(
        self,
        command: str,
        connection: RConnection,
        display: Optional[str] = None,
    ) -> RServerResult:
        logger.debug("Evaluate %s", display if display is not None else command)
        try:
            result = connection.eval(command)
        except RServerError as exc:
            raise ExecutionError("Remote evaluation failed") from exc
        if result is None:
            raise ExecutionError("Eval returned null")
        return result

    def _cleanup(self, command: str, connection: RConnection) -> None:
        """Run a file cleanup command, logging instead of raising."""
        try:
            self._evaluate(command, connection)
        except ExecutionError as exc:
            logger.warning("Cleanup '%s' failed: %s", command, exc.__cause__ or exc)

    # ------------------------------------------------------------------
    # Workspaces
    # ------------------------------------------------------------------

    def save_workspace(
        self,
        connection: RConnection,
        sink: Callable[[BinaryIO], None],
    ) -> None:
        """Save the backend workspace and stream it to ``sink``.

        The remote file stream is closed once ``sink`` returns or raises.
        """
        logger.debug("Save workspace")
        self.execute(commands.save_image(), connection)
        try:
            with connection.open_file(self._config.workspace_file) as stream:
                sink(stream)
        except (OSError, RServerError) as exc:
            raise ExecutionError("Failed to read saved workspace") from exc

    def load_workspace(
        self,
        connection: RConnection,
        resource: ResourcePort,
        environment: str,
    ) -> None:
        """Load a saved workspace into the named R environment.

        Args:
            connection: Live backend connection.
            resource: Serialized workspace (``.RData`` content).
            environment: R expression naming the target environment.
        """
        logger.debug("Load workspace into %s", environment)
        workspace_file = self._config.workspace_file
        try:
            self.copy_file(resource, workspace_file, connection)
            # Evaluated without try() so a broken image fails the load
            self._evaluate(commands.load_image(workspace_file, environment), connection)
        finally:
            self._cleanup(commands.unlink(workspace_file), connection)

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def load_table(
        self,
        connection: RConnection,
        resource: ResourcePort,
        filename: str,
        symbol: str,
        variables: Iterable[str] = (),
    ) -> None:
        """Load a parquet table into ``symbol``.

        Args:
            connection: Live backend connection.
            resource: Parquet file content.
            filename: Object name of the table, may contain '/'.
            symbol: R symbol to assign the table to.
            variables: Columns to keep; empty means all columns.
        """
        logger.debug("Load table from file %s into %s", filename, symbol)
        remote_name = flatten_filename(filename)
        try:
            self.copy_file(resource, remote_name, connection)
            self.execute(commands.read_parquet(symbol, remote_name, variables), connection)
        finally:
            self._cleanup(commands.unlink(remote_name), connection)

    def load_resource(
        self,
        principal: Principal,
        connection: RConnection,
        resource: ResourcePort,
        filename: str,
        symbol: str,
    ) -> None:
        """Bind a resource client for a resource description to ``symbol``.

        The caller's bearer token becomes the resource's access secret.

        Raises:
            TokenRequiredError: If ``principal`` carries no bearer token.
        """
        token = getattr(principal, "token", None)
        if not token:
            raise TokenRequiredError(principal.name)

        logger.debug("Load resource from file %s into %s", filename, symbol)
        remote_name = flatten_filename(filename)
        try:
            self.copy_file(resource, remote_name, connection)
            self.execute(commands.read_rds(_RDS_SYMBOL, remote_name), connection)
        finally:
            self._cleanup(commands.unlink(remote_name), connection)

        self._evaluate(
            commands.trap(commands.new_resource(_RESOURCE_SYMBOL, _RDS_SYMBOL, token)),
            connection,
            display=f"resourcer::newResource(<{_RDS_SYMBOL}>, secret=***)",
        )
        self.execute(commands.new_resource_client(symbol, _RESOURCE_SYMBOL), connection)

    # ------------------------------------------------------------------
    # Packages
    # ------------------------------------------------------------------

    def install_package(
        self,
        connection: RConnection,
        resource: ResourcePort,
        filename: str,
    ) -> str:
        """Install a source package archive and verify it loads.

        Args:
            connection: Live backend connection.
            resource: Archive content.
            filename: Archive filename, ``<name>_<version>.tar.gz``.

        Returns:
            The logical package name.

        Raises:
            InvalidPackageError: If ``filename`` is not a ``.tar.gz`` archive.
            PackageInstallFailedError: If the package cannot be required.
        """
        package = PackageReference(filename)

        logger.info("Installing package '%s'", filename)
        remote_name = package.remote_filename
        try:
            self.copy_file(resource, remote_name, connection)
            self.execute(commands.install_local(remote_name), connection)
            result = self.execute(commands.require(package.package_name), connection)
            if not result.as_logical():
                raise PackageInstallFailedError(package.package_name)
        finally:
            self._cleanup(commands.file_remove(remote_name), connection)
        return package.package_name

    def get_installed_options(self, connection: RConnection) -> Dict[str, str]:
        """Collect the options declared by the installed packages.

        Packages are read in library order; a later package overrides an
        option declared by an earlier one.

        Raises:
            ExecutionError: If the package listing fails.
        """
        result = self.execute(commands.installed_package_options(), connection)
        if result.is_error():
            raise ExecutionError("Failed to list installed package options")

        fields = result.as_native()
        if fields is None:
            fields = []
        elif isinstance(fields, str):
            fields = [fields]

        options: Dict[str, str] = {}
        for field in fields:
            options.update(parse_package_options(field))
        return options

    # ------------------------------------------------------------------
    # Transfer
    # ------------------------------------------------------------------

    def copy_file(
        self,
        resource: ResourcePort,
        remote_name: str,
        connection: RConnection,
    ) -> TransferStatsDTO:
        """Copy a resource into a file in the backend's working directory.

        Raises:
            ExecutionError: If reading or writing fails mid-transfer.
        """
        logger.info("Copying '%s' to R...", remote_name)
        buffer_size = self._config.buffer_size
        start = time.perf_counter()
        size = 0
        try:
            with resource.open() as source, connection.create_file(remote_name) as target:
                while True:
                    chunk = source.read(buffer_size)
                    if not chunk:
                        break
                    target.write(chunk)
                    size += len(chunk)
        except (OSError, RServerError) as exc:
            raise ExecutionError(f"Failed to copy '{remote_name}' to backend") from exc

        stats = TransferStatsDTO(
            remote_name=remote_name,
            size_bytes=size,
            elapsed_us=int((time.perf_counter() - start) * 1_000_000),
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Copied %s in %dms [%.03f MB/s]",
                _display_size(stats.size_bytes),
                stats.elapsed_us // 1000,
                stats.megabytes_per_second,
            )
        return stats
