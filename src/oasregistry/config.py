"""Configuration loading with atomic writes and precedence resolution.

This module resolves the :class:`~oasregistry.models.RegistryConfig` a
:class:`~oasregistry.registry.Registry` is constructed with:

* **Project config** -- an ``oasregistry.json`` file in the working
  directory, written by ``oasreg init`` via :func:`save_project_config`
  and read by :func:`load_project_config`.
* **Environment** -- ``OASREGISTRY_HOST_MODULE`` and
  ``OASREGISTRY_TRIM_PREFIXES`` (comma-separated).
* **Precedence resolution** -- :func:`resolve_config` merges explicit
  arguments, environment variables, and the project file into the final
  effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent a half-written config on crash.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from oasregistry.exceptions import ConfigError
from oasregistry.models import RegistryConfig

PROJECT_CONFIG_FILENAME = "oasregistry.json"

ENV_HOST_MODULE = "OASREGISTRY_HOST_MODULE"
ENV_TRIM_PREFIXES = "OASREGISTRY_TRIM_PREFIXES"


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Project-local config ---


def project_config_path(directory: Optional[Path] = None) -> Path:
    """Path of ``oasregistry.json`` in *directory* (default: the working directory)."""
    return (directory or Path.cwd()) / PROJECT_CONFIG_FILENAME


def load_project_config(directory: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``oasregistry.json``.

    Args:
        directory: Directory holding the file. Defaults to the working
            directory.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = project_config_path(directory)
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(
            f"Invalid project config at {path}: expected a JSON object, got {type(data).__name__}"
        )
    return data


def save_project_config(config: RegistryConfig, directory: Optional[Path] = None) -> Path:
    """Persist *config* atomically as ``oasregistry.json``.

    Fields left at their defaults are omitted so the file only pins what
    the user chose.

    Returns:
        The path written.
    """
    path = project_config_path(directory)
    data = config.model_dump(mode="json", exclude_defaults=True)
    _atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


# --- Precedence resolution ---


def resolve_config(
    host_module: Optional[str] = None,
    schema_key_prefixes_to_trim: Optional[Sequence[str]] = None,
    openapi_version: Optional[str] = None,
    directory: Optional[Path] = None,
) -> RegistryConfig:
    """Resolve the registry configuration with the full precedence chain.

    Precedence (high to low):
        1. Explicit arguments
        2. Environment variables (``OASREGISTRY_HOST_MODULE``,
           ``OASREGISTRY_TRIM_PREFIXES``)
        3. Project config (``./oasregistry.json``)
        4. Defaults

    A ``host_module`` still ``None`` after resolution means "discover it
    from the running program" when the registry is constructed.

    Returns:
        The effective :class:`~oasregistry.models.RegistryConfig`.

    Raises:
        ConfigError: If the project file or the merged values fail
            validation.
    """
    # 4 + 3. Defaults layered with the project file
    merged: dict[str, Any] = dict(load_project_config(directory) or {})

    # 2. Environment
    env_host = os.environ.get(ENV_HOST_MODULE)
    if env_host is not None:
        merged["host_module"] = env_host
    env_prefixes = os.environ.get(ENV_TRIM_PREFIXES)
    if env_prefixes:
        merged["schema_key_prefixes_to_trim"] = [
            p.strip() for p in env_prefixes.split(",") if p.strip()
        ]

    # 1. Explicit arguments
    if host_module is not None:
        merged["host_module"] = host_module
    if schema_key_prefixes_to_trim is not None:
        merged["schema_key_prefixes_to_trim"] = list(schema_key_prefixes_to_trim)
    if openapi_version is not None:
        merged["openapi_version"] = openapi_version

    try:
        return RegistryConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid registry configuration: {exc}") from exc
