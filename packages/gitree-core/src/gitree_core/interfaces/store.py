"""Object store interface and the raw records it exchanges."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gitree_core.oid import Oid

_HEX_PATTERN = r"^[0-9a-f]{40}$|^[0-9a-f]{64}$"


class RawTreeEntry(BaseModel):
    """One (name, id, mode) triple as recorded in a stored tree."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    oid: str = Field(pattern=_HEX_PATTERN)
    mode: int

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if "/" in v or "\0" in v:
            raise ValueError(f"entry name cannot contain '/' or NUL: {v!r}")
        return v


class RawTree(BaseModel):
    """A stored tree: its full id and its child triples."""

    model_config = ConfigDict(frozen=True)

    oid: str = Field(pattern=_HEX_PATTERN)
    entries: tuple[RawTreeEntry, ...] = ()


class RawBlob(BaseModel):
    """A stored blob: its full id and its content."""

    model_config = ConfigDict(frozen=True)

    oid: str = Field(pattern=_HEX_PATTERN)
    data: bytes


@runtime_checkable
class TreeBuilder(Protocol):
    """Stages (name, id, mode) triples and writes them out as one tree."""

    def insert(self, name: str, oid: Oid, mode: int) -> None: ...

    async def write(self) -> Oid: ...


@runtime_checkable
class ObjectStore(Protocol):
    """Content-addressed key/value store for tree and blob objects.

    Partial ids may be passed to the lookup methods; the store resolves them
    to a unique object or raises ``ObjectLookupFailed`` when ambiguous.
    """

    async def lookup_tree(self, oid: Oid) -> RawTree | None: ...

    async def lookup_blob(self, oid: Oid) -> RawBlob | None: ...

    async def write_blob(self, data: bytes) -> Oid: ...

    def tree_builder(self) -> TreeBuilder: ...
