"""Command-line interface for metwords."""

from .main import main

__all__ = ["main"]
