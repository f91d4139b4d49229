"""Terminal output and logging setup."""

import json
import logging
import sys

from rich.console import Console
from rich.json import JSON
from rich.logging import RichHandler
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)

PACKAGE_LOGGER = "modnet_keys"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Send package log records to stderr through rich."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def print_json(data_obj: dict) -> None:
    """Pretty-print JSON to terminal if TTY, otherwise emit raw JSON for piping."""
    if sys.stdout.isatty():
        console.print(JSON.from_data(data_obj))
    else:
        sys.stdout.write(json.dumps(data_obj, indent=2) + "\n")


def print_line(text: str) -> None:
    """Write one plain line to stdout, bypassing rich markup."""
    sys.stdout.write(text + "\n")


def print_error(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
