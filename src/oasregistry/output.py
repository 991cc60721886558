"""What ``oasreg`` prints, and where.

Following `clig.dev <https://clig.dev/>`_, the exported document, the
``inspect`` tables and derived operation ids go to **stdout** so they can be
piped; confirmations and errors go to **stderr**. Everything else the
package has to say is a ``logging`` record, rendered on stderr by the
``RichHandler`` that :func:`~oasregistry.app.main_callback` installs.

Tables render with Rich when stdout is an interactive terminal and colour is
allowed, and as tab-separated lines otherwise. ``NO_COLOR``, ``TERM=dumb``
and ``--no-color`` all disable colour.

:func:`~oasregistry.app.main_callback` builds one :class:`OutputManager`
from the global flags and installs it with :func:`set_output`; commands
then use the module-level helpers.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormat(str, Enum):
    """How tables are rendered. ``AUTO`` picks ``RICH`` on a colour TTY, else ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes ``oasreg`` output to stdout, stderr or a file.

    Args:
        format: Table format; ``AUTO`` is resolved against the terminal.
        no_color: Disable colour and Rich markup on both streams.
        quiet: Suppress the success confirmations on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        if format == OutputFormat.AUTO:
            format = OutputFormat.PLAIN if self._no_color or not _is_tty() else OutputFormat.RICH
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def stderr_console(self) -> Console:
        """The stderr console, shared with the log handler."""
        return self._stderr

    def print_data(self, text: str) -> None:
        """Print *text* to stdout, ending it with exactly one newline."""
        sys.stdout.write(text if text.endswith("\n") else text + "\n")
        sys.stdout.flush()

    def write_data(self, text: str, output_file: Optional[Path] = None) -> None:
        """Write *text* atomically to *output_file*, or to stdout when it is ``None``."""
        if output_file is None:
            self.print_data(text)
            return
        from oasregistry.config import _atomic_write

        _atomic_write(output_file, text if text.endswith("\n") else text + "\n")

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print *rows* under *headers* to stdout.

        JSON output is an array of objects keyed by header; plain output is
        one tab-separated line per row, headers first.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return
        if self._format == OutputFormat.PLAIN:
            self.print_data("\n".join("\t".join(line) for line in [headers, *rows]))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    def success(self, message: str) -> None:
        """Confirm a completed action on stderr, unless ``--quiet``."""
        if self._quiet:
            return
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[green]{escape(message)}[/green]")

    def error(self, message: str) -> None:
        """Report a failure on stderr. Never suppressed."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {escape(message)}")


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` (any value, even empty) or ``TERM=dumb`` disables colour."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# --- Global instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; the next :func:`get_output` builds a fresh one."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def write_data(text: str, output_file: Optional[Path] = None) -> None:
    get_output().write_data(text, output_file)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)
