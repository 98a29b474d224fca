"""Output modules."""

from .collection_writer import CollectionWriter

__all__ = ["CollectionWriter"]
