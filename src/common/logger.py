"""Rich-backed logging for the collection pipeline.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Matching 12 item(s)...")
"""

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler

# Shared console so log lines and tables printed by the CLI interleave cleanly
console = Console()


def _rich_handler(show_time: bool = False, show_path: bool = False) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        tracebacks_show_locals=True,
        markup=True,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def get_logger(
    name: str,
    level: str | None = None,
    show_time: bool = False,
    show_path: bool = False,
) -> logging.Logger:
    """Get a logger that writes through the shared rich console.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level name. Falls back to the LOG_LEVEL environment
               variable, then INFO.
        show_time: Show timestamp in log output
        show_path: Show source location in log output

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Already configured by an earlier call
    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    logger.setLevel(level.upper())

    logger.addHandler(_rich_handler(show_time=show_time, show_path=show_path))

    # pytest's caplog captures through propagation
    logger.propagate = True

    return logger


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger once, at the CLI entry point.

    Console output already comes from the handler `get_logger` attaches to each
    module logger, so the root logger only receives the optional file handler.

    Args:
        level: Root logger level (LOG_LEVEL overrides it)
        log_file: Optional file path that also receives every record
    """
    level = os.getenv("LOG_LEVEL", level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)


def success(message: str) -> None:
    """Print a message with a green check mark."""
    console.print(f"[green]✓[/green] {message}")


def warning(message: str) -> None:
    """Print a message with a yellow warning sign."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def error(message: str) -> None:
    """Print a message with a red cross to stderr."""
    Console(file=sys.stderr).print(f"[red]✗[/red] {message}")
