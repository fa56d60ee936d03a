"""Object store backends."""

from gitree_core.store.dulwich_store import DulwichObjectStore, DulwichTreeBuilder, open_store

__all__ = [
    "DulwichObjectStore",
    "DulwichTreeBuilder",
    "open_store",
]
