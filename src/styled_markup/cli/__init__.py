"""Command-line interface module for styled markup.

This module provides the ``styled-markup`` tool rendering markup files to
view-tree snapshots.
"""

from .main import main

__all__ = ["main"]
