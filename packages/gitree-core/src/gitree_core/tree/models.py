"""Tree entries, identity states and the Tree value itself."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from gitree_core.blob import MODE_BLOB, MODE_BLOB_EXECUTABLE, MODE_TREE, Blob
from gitree_core.oid import Oid
from gitree_core.refs import ById, ByObject

if TYPE_CHECKING:
    from gitree_core.interfaces.store import ObjectStore


@dataclass(frozen=True)
class BlobEntry:
    """A file in a tree: a blob reference plus its executable bit."""

    ref: ById[Blob] | ByObject[Blob]
    executable: bool = False

    @property
    def mode(self) -> int:
        return MODE_BLOB_EXECUTABLE if self.executable else MODE_BLOB


@dataclass(frozen=True)
class SubtreeEntry:
    """A directory in a tree."""

    ref: ById[Tree] | ByObject[Tree]

    @property
    def mode(self) -> int:
        return MODE_TREE


TreeEntry = BlobEntry | SubtreeEntry


@dataclass(frozen=True)
class Pending:
    """Dirty: the tree must go through TreeWriter.write before it has an id."""


@dataclass(frozen=True)
class Stored:
    """Persisted under an immutable id."""

    oid: Oid


def _check_name(name: str) -> None:
    if not isinstance(name, str) or not name:
        raise ValueError(f"tree entry name must be a non-empty string, got {name!r}")
    if "/" in name or "\0" in name:
        raise ValueError(f"tree entry name cannot contain '/' or NUL: {name!r}")


@dataclass(frozen=True)
class Tree:
    """An immutable name -> entry mapping bound to the store it lives in.

    Edits never happen in place; the walker builds new Tree values that share
    every untouched subtree with the old one.
    """

    store: ObjectStore = field(repr=False, compare=False)
    entries: Mapping[str, TreeEntry] = field(default_factory=dict, hash=False)
    identity: Pending | Stored = field(default_factory=Pending)

    def __post_init__(self) -> None:
        for name in self.entries:
            _check_name(name)
        ordered = dict(sorted(self.entries.items()))
        object.__setattr__(self, "entries", MappingProxyType(ordered))

    @property
    def oid(self) -> Oid | None:
        if isinstance(self.identity, Stored):
            return self.identity.oid
        return None

    @property
    def is_stored(self) -> bool:
        return isinstance(self.identity, Stored)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def get(self, name: str) -> TreeEntry | None:
        return self.entries.get(name)

    def with_entries(self, entries: Mapping[str, TreeEntry]) -> Tree:
        """Return a new, Pending tree on the same store."""
        return Tree(store=self.store, entries=entries, identity=Pending())

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __repr__(self) -> str:
        if isinstance(self.identity, Stored):
            return f"Tree#{self.identity.oid.short}"
        return "Tree..."


# ── Entry constructors ───────────────────────────────────────────────


def blob_ref_with_mode(blob: Blob, executable: bool) -> BlobEntry:
    return BlobEntry(ByObject(blob), executable)


def blob_ref(blob: Blob) -> BlobEntry:
    return blob_ref_with_mode(blob, False)


def exe_blob_ref(blob: Blob) -> BlobEntry:
    return blob_ref_with_mode(blob, True)


def blob_id_ref(oid: Oid, executable: bool = False) -> BlobEntry:
    """Reference a stored blob by id; partial ids raise InvalidOidForReference."""
    return BlobEntry(ById(oid), executable)


def tree_ref(tree: Tree) -> SubtreeEntry:
    return SubtreeEntry(ByObject(tree))


def tree_id_ref(oid: Oid) -> SubtreeEntry:
    """Reference a stored tree by id; partial ids raise InvalidOidForReference."""
    return SubtreeEntry(ById(oid))
