"""Blob objects: opaque file contents with their own persistence."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from gitree_core.oid import Oid

if TYPE_CHECKING:
    from gitree_core.interfaces.store import ObjectStore

# File modes written into tree objects
MODE_BLOB = 0o100644
MODE_BLOB_EXECUTABLE = 0o100755
MODE_TREE = 0o040000


@dataclass(frozen=True)
class Blob:
    """File content, plus its id once it has been written to a store."""

    data: bytes
    oid: Oid | None = None

    @property
    def is_stored(self) -> bool:
        return self.oid is not None

    async def persist(self, store: ObjectStore) -> Blob:
        """Write the blob if needed and return it with its id set."""
        if self.oid is not None:
            return self
        oid = await store.write_blob(self.data)
        return replace(self, oid=oid)

    def __repr__(self) -> str:
        if self.oid is None:
            return f"Blob...({len(self.data)} bytes)"
        return f"Blob#{self.oid.short}"


async def load_blob(store: ObjectStore, oid: Oid) -> Blob | None:
    """Fetch a blob by id, or None when the store has no such object."""
    raw = await store.lookup_blob(oid)
    if raw is None:
        return None
    return Blob(data=raw.data, oid=Oid(raw.oid))
