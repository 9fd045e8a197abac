"""Note parsing and caching."""

from .cache import NoteCache, scan_directory
from .parser import parse

__all__ = [
    "NoteCache",
    "scan_directory",
    "parse",
]
