"""Creating empty trees and loading stored ones."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitree_core.blob import MODE_BLOB, MODE_BLOB_EXECUTABLE, MODE_TREE
from gitree_core.errors import TreeLookupFailed
from gitree_core.oid import Oid
from gitree_core.refs import ById
from gitree_core.tree.models import BlobEntry, Stored, SubtreeEntry, Tree, TreeEntry

if TYPE_CHECKING:
    from gitree_core.interfaces.store import ObjectStore, RawTreeEntry

logger = logging.getLogger(__name__)


def create_tree(store: ObjectStore) -> Tree:
    """Create a new, empty tree.

    Empty trees have no representation in the store, so writing one out is
    a no-op.
    """
    return Tree(store=store)


def _entry_from_raw(raw: RawTreeEntry) -> TreeEntry:
    oid = Oid(raw.oid)
    if raw.mode == MODE_TREE:
        return SubtreeEntry(ById(oid))
    if raw.mode in (MODE_BLOB, MODE_BLOB_EXECUTABLE):
        return BlobEntry(ById(oid), executable=raw.mode == MODE_BLOB_EXECUTABLE)
    raise TreeLookupFailed(f"unsupported entry mode {raw.mode:o}", raw.name)


async def load_tree(store: ObjectStore, oid: Oid) -> Tree | None:
    """Load a stored tree; every child starts out as a by-id reference.

    *oid* may be a prefix; the store disambiguates it.
    """
    raw = await store.lookup_tree(oid)
    if raw is None:
        logger.debug("Tree %s not found", oid.hex)
        return None
    entries = {e.name: _entry_from_raw(e) for e in raw.entries}
    return Tree(store=store, entries=entries, identity=Stored(Oid(raw.oid)))
