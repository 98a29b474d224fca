"""Collection grouping modules."""

from .collection_assembler import CollectionAssembler, UnknownCollectionPolicy
from .diversifier import Diversifier
from .ranking import rank_key, sort_by_rank

__all__ = [
    "CollectionAssembler",
    "Diversifier",
    "UnknownCollectionPolicy",
    "rank_key",
    "sort_by_rank",
]
