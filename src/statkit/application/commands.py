# Copyright (c) EGOGE - All Rights Reserved.
# This software may be used and distributed according to the terms of the MIT license.

"""R command templates evaluated by the execution bridge.

Every command the bridge sends to a backend is built here, so the full
remote command surface is visible in one place.
"""

from __future__ import annotations

from typing import Iterable


def quote(value: str) -> str:
    """Render a Python string as a single-quoted R string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def string_vector(values: Iterable[str]) -> str:
    """Render strings as an R character vector, keeping their order.

    >>> string_vector(["age", "sex"])
    "c('age','sex')"
    """
    return "c(" + ",".join(quote(v) for v in values) + ")"


def trap(command: str) -> str:
    """Wrap a command so R errors come back as a ``try-error`` result."""
    return f"try({{{command}}})"


def save_image() -> str:
    return "base::save.image()"


def load_image(filename: str, environment: str) -> str:
    return f"base::load(file={quote(filename)}, envir={environment})"


def unlink(filename: str) -> str:
    return f"base::unlink({quote(filename)})"


def read_parquet(symbol: str, filename: str, variables: Iterable[str] = ()) -> str:
    """Read a parquet file into ``symbol``, optionally selecting columns.

    Column selection uses ``tidyselect::any_of`` so missing columns are
    ignored rather than raising.
    """
    variables = list(variables)
    if variables:
        col_select = f"tidyselect::any_of({string_vector(variables)})"
        reader = f"arrow::read_parquet({quote(filename)}, col_select = {col_select})"
    else:
        reader = f"arrow::read_parquet({quote(filename)})"
    return f"is.null(base::assign({quote(symbol)}, value={{{reader}}}))"


def read_rds(symbol: str, filename: str) -> str:
    return f"is.null(base::assign({quote(symbol)},base::readRDS({quote(filename)})))"


def new_resource(handle_symbol: str, rds_symbol: str, secret: str) -> str:
    """Build a credential-bound resource handle from a deserialized spec."""
    return (
        f"is.null(base::assign({quote(handle_symbol)}, value={{resourcer::newResource(\n"
        f"        name = {rds_symbol}$name,\n"
        f"        url = {rds_symbol}$url,\n"
        f"        format = {rds_symbol}$format,\n"
        f"        secret = {quote(secret)}\n"
        f")}}))"
    )


def new_resource_client(symbol: str, handle_symbol: str) -> str:
    return (
        f"is.null(base::assign({quote(symbol)}, "
        f"value={{resourcer::newResourceClient({handle_symbol})}}))"
    )


def install_local(filename: str) -> str:
    return f"remotes::install_local({quote(filename)}, dependencies = TRUE, upgrade = 'never')"


def require(package_name: str) -> str:
    return f"require({quote(package_name)})"


def file_remove(filename: str) -> str:
    return f"file.remove({quote(filename)})"


def installed_package_options() -> str:
    """Non-empty ``Options`` DESCRIPTION fields of all installed packages."""
    return (
        "{o <- utils::installed.packages(fields = 'Options')[, 'Options']; "
        "base::unname(o[!base::is.na(o)])}"
    )
