"""notesift - browse and filter a directory of plain-text notes."""

__version__ = "0.1.0"
