"""Pieces of a Korn-style shell: input sources, glob matching, options, paths and mail checking."""

__version__ = "0.1.0"

__all__ = [
    "chartypes",
    "globmatch",
    "mail",
    "options",
    "paths",
    "source",
]