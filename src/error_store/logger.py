"""Logging configuration for validation runs."""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def setup_logging(
    log_file: Path | str | None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> logging.Logger:
    """Configure the root logger for console and optional file output.

    Safe to call repeatedly: the console handler is added once, and a file
    handler for a different path replaces the previous one. Handlers owned
    by others (e.g. pytest's caplog) are left alone.

    Args:
        log_file: Path to the log file, or None for console only
        console_level: Logging level for console output
        file_level: Logging level for file output

    Returns:
        The configured root logger
    """
    formatter = logging.Formatter(LOG_FORMAT)
    root_logger = logging.getLogger()

    has_console = any(
        type(h) is logging.StreamHandler and h.level == console_level
        for h in root_logger.handlers
    )
    if not has_console:
        # Replace undecodable characters instead of failing on narrow consoles
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(errors="replace")  # pyright: ignore[reportAttributeAccessIssue]
        console_handler = logging.StreamHandler(stream=sys.stdout)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.DEBUG)

    if log_file is None:
        return root_logger

    resolved_path = str(Path(log_file).resolve())
    for handler in list(root_logger.handlers):
        if isinstance(handler, logging.FileHandler) and handler.baseFilename != resolved_path:
            root_logger.removeHandler(handler)
            handler.close()

    has_file = any(
        isinstance(h, logging.FileHandler) and h.baseFilename == resolved_path
        for h in root_logger.handlers
    )
    if not has_file:
        Path(resolved_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(resolved_path, mode="a", encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger
