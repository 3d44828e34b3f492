"""
TreeClip - Flatten a directory tree into one text file.

This package walks a directory tree, prunes paths matched by gitignore-style
rules (``.treeclipignore`` plus patterns given on the command line), and
writes the content of every surviving text file into a single output file,
each preceded by a ``==> relative/path`` header.
"""

__version__ = "0.1.0"
__author__ = "TreeClip Team"

IGNORE_FILENAME = ".treeclipignore"
DEFAULT_OUTPUT_NAME = "treeclip_temp.txt"
