"""Collaborator interfaces consumed by the tree core."""

from gitree_core.interfaces.store import ObjectStore, RawBlob, RawTree, RawTreeEntry, TreeBuilder

__all__ = [
    "ObjectStore",
    "RawBlob",
    "RawTree",
    "RawTreeEntry",
    "TreeBuilder",
]
