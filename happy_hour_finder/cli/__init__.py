"""CLI entry points for the happy hour finder."""

from .run_collections import main as run_collections_main

__all__ = ["run_collections_main"]
