"""ObjectStore implementation backed by a dulwich object store."""

from __future__ import annotations

import asyncio
import logging
import threading
import zlib
from collections.abc import Callable
from pathlib import Path

from dulwich.errors import ObjectFormatException
from dulwich.object_store import BaseObjectStore, DiskObjectStore, MemoryObjectStore
from dulwich.objects import Blob as GitBlob
from dulwich.objects import ShaFile
from dulwich.objects import Tree as GitTree

from gitree_core.blob import MODE_BLOB, MODE_BLOB_EXECUTABLE, MODE_TREE
from gitree_core.config.models import StoreConfig
from gitree_core.errors import (
    BlobWriteFailed,
    ObjectLookupFailed,
    TreeBuilderCreateFailed,
    TreeBuilderInsertFailed,
    TreeBuilderWriteFailed,
)
from gitree_core.interfaces.store import RawBlob, RawTree, RawTreeEntry
from gitree_core.oid import Oid

logger = logging.getLogger(__name__)

_VALID_MODES = frozenset({MODE_BLOB, MODE_BLOB_EXECUTABLE, MODE_TREE})


class DulwichTreeBuilder:
    """Stages entries in a dulwich Tree and writes it through the owning store."""

    def __init__(self, write_object: Callable[[ShaFile], None]) -> None:
        self._write_object = write_object
        self._tree = GitTree()

    def insert(self, name: str, oid: Oid, mode: int) -> None:
        if oid.is_partial:
            raise TreeBuilderInsertFailed(f"{name!r} has a partial id {oid.hex}")
        if mode not in _VALID_MODES:
            raise TreeBuilderInsertFailed(f"{name!r} has unsupported mode {mode:o}")
        if not name or "/" in name or "\0" in name:
            raise TreeBuilderInsertFailed(f"invalid entry name {name!r}")
        self._tree.add(name.encode("utf-8"), mode, oid.to_bytes())

    async def write(self) -> Oid:
        if len(self._tree) == 0:
            raise TreeBuilderWriteFailed("refusing to write an empty tree")
        try:
            await asyncio.to_thread(self._write_object, self._tree)
        except OSError as e:
            raise TreeBuilderWriteFailed(cause=e) from e
        return Oid.parse(self._tree.id)


class DulwichObjectStore:
    """ObjectStore over dulwich's in-memory or on-disk object stores.

    Dulwich calls block, so they run in worker threads. Reads may overlap;
    writes go through a single lock so identical objects written by sibling
    tasks never race on the same loose-object file.
    """

    def __init__(self, objects: BaseObjectStore | None = None) -> None:
        self._objects = objects if objects is not None else MemoryObjectStore()
        self._write_lock = threading.Lock()
        self._closed = False

    @classmethod
    def open(cls, path: str | Path) -> DulwichObjectStore:
        """Open the object directory at *path*, creating it when missing."""
        path = Path(path)
        if (path / "info").is_dir():
            objects = DiskObjectStore(str(path))
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            logger.info("Initializing object store at %s", path)
            objects = DiskObjectStore.init(str(path))
        return cls(objects)

    @property
    def objects(self) -> BaseObjectStore:
        return self._objects

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._objects.close()

    def __enter__(self) -> DulwichObjectStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- helpers ---------------------------------------------------------------

    def _resolve_sha(self, oid: Oid) -> bytes | None:
        if oid.is_full:
            return oid.to_bytes()
        matches = list(dict.fromkeys(self._objects.iter_prefix(oid.to_bytes())))
        if not matches:
            return None
        if len(matches) > 1:
            raise ObjectLookupFailed(oid, f"ambiguous prefix matches {len(matches)} objects")
        return matches[0]

    def _read(self, oid: Oid) -> ShaFile | None:
        sha = self._resolve_sha(oid)
        if sha is None:
            return None
        try:
            return self._objects[sha]
        except KeyError:
            return None
        except (ObjectFormatException, zlib.error, ValueError) as e:
            raise ObjectLookupFailed(oid, "object could not be decoded", cause=e) from e

    def _read_tree(self, oid: Oid) -> RawTree | None:
        obj = self._read(oid)
        if obj is None:
            return None
        if not isinstance(obj, GitTree):
            raise ObjectLookupFailed(oid, f"expected a tree, found {obj.type_name.decode()}")
        try:
            entries = tuple(
                RawTreeEntry(name=e.path.decode("utf-8"), oid=e.sha.decode("ascii"), mode=e.mode)
                for e in obj.iteritems()
            )
        except (ObjectFormatException, UnicodeDecodeError) as e:
            raise ObjectLookupFailed(oid, "tree entries could not be decoded", cause=e) from e
        return RawTree(oid=obj.id.decode("ascii"), entries=entries)

    def _read_blob(self, oid: Oid) -> RawBlob | None:
        obj = self._read(oid)
        if obj is None:
            return None
        if not isinstance(obj, GitBlob):
            raise ObjectLookupFailed(oid, f"expected a blob, found {obj.type_name.decode()}")
        return RawBlob(oid=obj.id.decode("ascii"), data=obj.data)

    def _write_object(self, obj: ShaFile) -> None:
        if self._closed:
            raise OSError("object store is closed")
        with self._write_lock:
            self._objects.add_object(obj)

    def _write_blob(self, data: bytes) -> Oid:
        blob = GitBlob.from_string(data)
        try:
            self._write_object(blob)
        except OSError as e:
            raise BlobWriteFailed(e) from e
        return Oid.parse(blob.id)

    # -- ObjectStore protocol --------------------------------------------------

    async def lookup_tree(self, oid: Oid) -> RawTree | None:
        return await asyncio.to_thread(self._read_tree, oid)

    async def lookup_blob(self, oid: Oid) -> RawBlob | None:
        return await asyncio.to_thread(self._read_blob, oid)

    async def write_blob(self, data: bytes) -> Oid:
        return await asyncio.to_thread(self._write_blob, data)

    def tree_builder(self) -> DulwichTreeBuilder:
        if self._closed:
            raise TreeBuilderCreateFailed("object store is closed")
        return DulwichTreeBuilder(self._write_object)


def open_store(config: StoreConfig) -> DulwichObjectStore:
    """Build the store described by *config*."""
    if config.backend == "memory":
        return DulwichObjectStore()
    return DulwichObjectStore.open(config.path)
