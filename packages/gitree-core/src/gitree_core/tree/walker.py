"""Path-based lookup and copy-on-write modification of trees."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from functools import partial
from typing import TypeVar

from gitree_core.blob import load_blob
from gitree_core.errors import TreeCannotTraverseBlob, TreeLookupFailed
from gitree_core.refs import ByObject, materialize, resolve
from gitree_core.result import Err, Ok
from gitree_core.tree.loader import create_tree, load_tree
from gitree_core.tree.models import BlobEntry, SubtreeEntry, Tree, TreeEntry, tree_ref
from gitree_core.tree.paths import PathLike, split_path

logger = logging.getLogger(__name__)

E = TypeVar("E")

Transform = Callable[[TreeEntry | None], "Ok[TreeEntry | None] | Err[E]"]


async def materialize_entry(entry: TreeEntry, tree: Tree) -> TreeEntry:
    """Return *entry* with its reference resolved against *tree*'s store."""
    if isinstance(entry.ref, ByObject):
        return entry
    if isinstance(entry, BlobEntry):
        ref = await materialize(entry.ref, partial(load_blob, tree.store))
        return BlobEntry(ref, entry.executable)
    ref = await materialize(entry.ref, partial(load_tree, tree.store))
    return SubtreeEntry(ref)


async def lookup_entry(tree: Tree, path: PathLike) -> TreeEntry | None:
    """Find the entry at *path*, materializing every tree along the way.

    The empty path names *tree* itself.
    """
    names = split_path(path)
    current = tree
    for depth, name in enumerate(names):
        entry = current.get(name)
        if entry is None:
            return None
        last = depth == len(names) - 1
        if isinstance(entry, BlobEntry) and not last:
            raise TreeCannotTraverseBlob(name)
        entry = await materialize_entry(entry, current)
        if last:
            return entry
        current = entry.ref.obj
    return tree_ref(tree)


async def modify_tree(
    tree: Tree,
    path: PathLike,
    transform: Transform,
    create_intermediates: bool = False,
) -> Ok[Tree] | Err[E]:
    """Apply *transform* to the entry at *path* and rebuild the path to the root.

    *transform* receives the current entry with its reference loaded (or
    None) and returns ``Ok(entry)`` to insert or replace it, ``Ok(None)`` to
    delete it, or ``Err(...)`` to abandon the change.
    An ``Err`` comes back verbatim and *tree* is left untouched.

    Missing intermediate trees are created only when *create_intermediates*
    is set; otherwise TreeLookupFailed is raised. Subtrees emptied by the
    change are dropped from their parents. Every tree rebuilt on the way
    back up is Pending, even when its contents compare equal to before.
    """
    names = split_path(path)
    if not names:
        raise TreeLookupFailed("cannot modify the empty path")
    return await _modify(names, transform, create_intermediates, tree)


async def _modify(
    names: Sequence[str],
    transform: Transform,
    create_intermediates: bool,
    tree: Tree,
) -> Ok[Tree] | Err[E]:
    name, rest = names[0], names[1:]
    current = tree.get(name)

    if not rest:
        if current is not None:
            current = await materialize_entry(current, tree)
        outcome = transform(current)
        if isinstance(outcome, Err):
            return outcome
        if not isinstance(outcome, Ok):
            raise TypeError(f"transform must return Ok or Err, got {outcome!r}")
        entries = dict(tree.entries)
        if outcome.value is None:
            entries.pop(name, None)
        elif isinstance(outcome.value, (BlobEntry, SubtreeEntry)):
            entries[name] = outcome.value
        else:
            raise TypeError(f"transform produced a non-entry value: {outcome.value!r}")
        return Ok(tree.with_entries(entries))

    # Raising here keeps structural failures apart from the caller's Err values.
    if current is None:
        if not create_intermediates:
            raise TreeLookupFailed("no tree at path component", name)
        child = create_tree(tree.store)
    elif isinstance(current, BlobEntry):
        raise TreeCannotTraverseBlob(name)
    else:
        child = await resolve(current.ref, partial(load_tree, tree.store))

    outcome = await _modify(rest, transform, create_intermediates, child)
    if isinstance(outcome, Err):
        return outcome

    updated = outcome.value
    entries = dict(tree.entries)
    if updated.is_empty:
        logger.debug("Pruning empty subtree %r", name)
        entries.pop(name, None)
    else:
        entries[name] = tree_ref(updated)
    return Ok(tree.with_entries(entries))


async def update_tree(tree: Tree, path: PathLike, entry: TreeEntry) -> Tree:
    """Insert or replace *entry* at *path*, creating intermediate trees."""
    outcome = await modify_tree(tree, path, lambda _: Ok(entry), create_intermediates=True)
    return outcome.unwrap()


async def remove_from_tree(tree: Tree, path: PathLike) -> Tree:
    """Delete the entry at *path*, pruning directories left empty."""
    outcome = await modify_tree(tree, path, lambda _: Ok(None), create_intermediates=False)
    return outcome.unwrap()
