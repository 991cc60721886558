"""Typer application factory and CLI entry point for oasregistry.

This module wires together the ``oasreg`` command line tool:

* ``export`` -- import a registry (or a factory building one) and write the
  resulting document as JSON or YAML.
* ``inspect`` -- list the operations and cataloged schemas of a registry.
* ``operation-id`` -- preview the operation id derived for a method and path.
* ``init`` -- write a project-local ``oasregistry.json``.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Registration errors raised while importing a target exit
with the error's ``exit_code`` (see :mod:`oasregistry.exit_codes`).

See Also:
    :mod:`oasregistry.config`: Project configuration resolution.
    :mod:`oasregistry.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer
from rich.logging import RichHandler

from oasregistry import __version__
from oasregistry.exceptions import RegistryError
from oasregistry.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE
from oasregistry.output import error, print_data, print_table, success, write_data

app = typer.Typer(
    name="oasreg",
    help="Build and export OpenAPI documents from endpoint registries.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

_PACKAGE_LOGGER = "oasregistry"


class DocumentFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"oasreg {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route the package's log records to stderr through Rich.

    Only the ``oasregistry`` logger is touched so that applications importing
    their registries keep their own logging configuration.
    """
    from oasregistry.output import get_output

    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    package_logger.addHandler(
        RichHandler(console=get_output().stderr_console, show_time=False, show_path=False)
    )
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON table output."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text table output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~oasregistry.output.OutputManager` from
    CLI flags and configures logging for the ``oasregistry`` package.
    """
    from oasregistry.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet))
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def _fail(exc: RegistryError) -> typer.Exit:
    error(str(exc))
    return typer.Exit(code=exc.exit_code)


@app.command("export")
def export_command(
    target: str = typer.Argument(
        ..., help="Registry to export, as 'package.module:attribute'."
    ),
    format: DocumentFormat = typer.Option(
        DocumentFormat.JSON, "--format", "-f", help="Serialization format."
    ),
    output_file: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the document to this file instead of stdout."
    ),
    app_dir: Path = typer.Option(
        Path("."), "--app-dir", help="Directory to import the target from."
    ),
) -> None:
    """Build the target registry and print its OpenAPI document.

    Example::

        oasreg export acme.billing.api:registry --format yaml -o openapi.yaml
    """
    from oasregistry.loader import load_target

    try:
        document = load_target(target, app_dir=app_dir)
    except RegistryError as exc:
        raise _fail(exc) from None

    text = document.to_yaml() if format == DocumentFormat.YAML else document.to_json()
    write_data(text, output_file)
    if output_file is not None:
        success(f"Wrote {output_file}")


@app.command("inspect")
def inspect_command(
    target: str = typer.Argument(
        ..., help="Registry to inspect, as 'package.module:attribute'."
    ),
    app_dir: Path = typer.Option(
        Path("."), "--app-dir", help="Directory to import the target from."
    ),
) -> None:
    """List the operations and component schemas of the target registry."""
    from oasregistry.loader import load_target

    try:
        document = load_target(target, app_dir=app_dir)
    except RegistryError as exc:
        raise _fail(exc) from None

    rows = [
        [method.value, path, operation.operation_id or "", operation.summary or ""]
        for path, item in document.paths.items()
        for method, operation in item.operations()
    ]
    print_table(["Method", "Path", "Operation ID", "Summary"], rows, title="Operations")

    schema_names = sorted(document.components.schemas) if document.components else []
    print_table(["Schema"], [[name] for name in schema_names], title="Schemas")


@app.command("operation-id")
def operation_id_command(
    method: str = typer.Argument(..., help="HTTP method, e.g. GET."),
    path: str = typer.Argument(..., help="Path template, e.g. /users/{userId}."),
) -> None:
    """Print the operation id derived for METHOD and PATH."""
    from oasregistry.paths import synthesize_operation_id

    try:
        print_data(synthesize_operation_id(method, path))
    except RegistryError as exc:
        raise _fail(exc) from None


@app.command("init")
def init_command(
    host_module: Optional[str] = typer.Option(
        None, "--host-module", help="Dotted module path owning the payload types."
    ),
    trim_prefix: Optional[list[str]] = typer.Option(
        None, "--trim-prefix", help="Prefix to strip from schema names (repeatable)."
    ),
    openapi_version: Optional[str] = typer.Option(
        None, "--openapi-version", help="Value of the document's 'openapi' field."
    ),
    force: bool = typer.Option(
        False, "--force", help="Overwrite an existing oasregistry.json."
    ),
) -> None:
    """Write a project-local oasregistry.json in the current directory."""
    from oasregistry.config import project_config_path, resolve_config, save_project_config

    path = project_config_path()
    if path.exists() and not force:
        error(f"{path} already exists. Use --force to overwrite.")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    try:
        config = resolve_config(
            host_module=host_module,
            schema_key_prefixes_to_trim=trim_prefix,
            openapi_version=openapi_version,
        )
        written = save_project_config(config)
    except RegistryError as exc:
        raise _fail(exc) from None
    success(f"Wrote {written}")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``oasreg`` console script.

    Unhandled :class:`~oasregistry.exceptions.RegistryError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    are reported and exit with :data:`~oasregistry.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except RegistryError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        logging.getLogger(_PACKAGE_LOGGER).debug("Unhandled exception", exc_info=True)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
