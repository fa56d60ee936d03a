"""Writing pending trees to the store, children before parents."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import partial

from gitree_core.blob import load_blob
from gitree_core.config.models import SerializerConfig
from gitree_core.oid import Oid
from gitree_core.refs import ByObject, resolve
from gitree_core.tree.loader import load_tree
from gitree_core.tree.models import BlobEntry, Stored, SubtreeEntry, Tree, TreeEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Written:
    """Result of persisting one entry: the entry to keep and what the builder needs."""

    name: str
    entry: TreeEntry
    oid: Oid | None
    mode: int


class TreeWriter:
    """Persists trees bottom-up, fanning out over the entries of each level.

    Siblings are written concurrently and joined before their parent's
    builder runs. ``max_concurrency`` caps how many store calls are in
    flight at once; with a value of 1 store access is fully sequential.
    """

    def __init__(self, config: SerializerConfig | None = None) -> None:
        self.config = config or SerializerConfig()
        self._io_slots = asyncio.Semaphore(self.config.max_concurrency)

    async def write(self, tree: Tree) -> Tree:
        """Return *tree* in Stored state, writing whatever is still pending.

        Stored trees come back unchanged and empty trees are never written.
        On failure the first error propagates, in-flight siblings are
        cancelled, and no tree value is produced.
        """
        if isinstance(tree.identity, Stored):
            return tree
        if tree.is_empty:
            logger.debug("Skipping write of empty tree")
            return tree

        # The group awaits every cancelled sibling; only the first error escapes.
        failure = None
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(self._write_entry(tree, name, entry))
                    for name, entry in tree.entries.items()
                ]
        except BaseExceptionGroup as eg:
            failure = eg.exceptions[0]
        if failure is not None:
            raise failure
        written = [task.result() for task in tasks]

        kept = [w for w in written if w.oid is not None]
        for w in written:
            if w.oid is None:
                logger.debug("Pruning empty subtree %r during write", w.name)
        if not kept:
            logger.warning("Every entry of the tree was empty; nothing to write")
            return tree.with_entries({})

        builder = tree.store.tree_builder()
        for w in kept:
            builder.insert(w.name, w.oid, w.mode)
        async with self._io_slots:
            oid = await builder.write()
        logger.debug("Wrote tree %s with %d entries", oid.hex, len(kept))

        return Tree(
            store=tree.store,
            entries={w.name: w.entry for w in kept},
            identity=Stored(oid),
        )

    async def _write_entry(self, tree: Tree, name: str, entry: TreeEntry) -> _Written:
        store = tree.store
        if isinstance(entry, BlobEntry):
            async with self._io_slots:
                blob = await resolve(entry.ref, partial(load_blob, store))
                blob = await blob.persist(store)
            return _Written(name, BlobEntry(ByObject(blob), entry.executable), blob.oid, entry.mode)

        if isinstance(entry.ref, ByObject):
            child = entry.ref.obj
        else:
            async with self._io_slots:
                child = await resolve(entry.ref, partial(load_tree, store))
        child = await self.write(child)
        return _Written(name, SubtreeEntry(ByObject(child)), child.oid, entry.mode)


async def persist_tree(tree: Tree, config: SerializerConfig | None = None) -> Tree:
    """Write *tree* and everything pending beneath it; see TreeWriter.write."""
    return await TreeWriter(config).write(tree)
