"""Storage of validation findings as flat rows."""

from .export import export_errors
from .read_write import load_errors, write_errors
from .rows import errors_from_frame, errors_to_frame, summarize_errors

__all__ = [
    "errors_from_frame",
    "errors_to_frame",
    "export_errors",
    "load_errors",
    "summarize_errors",
    "write_errors",
]
