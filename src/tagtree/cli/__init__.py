"""Command-line interface for tagtree."""

from .main import main

__all__ = ["main"]
