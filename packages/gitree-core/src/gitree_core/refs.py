"""Lazy object references: either an id to load on demand, or a resident object."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from gitree_core.errors import InvalidOidForReference, ObjectLookupFailed
from gitree_core.oid import Oid

logger = logging.getLogger(__name__)

T = TypeVar("T")

Loader = Callable[[Oid], Awaitable["T | None"]]


@dataclass(frozen=True)
class ById(Generic[T]):
    """A deferred pointer to an object in the store."""

    oid: Oid

    def __post_init__(self) -> None:
        if self.oid.is_partial:
            raise InvalidOidForReference(self.oid)


@dataclass(frozen=True)
class ByObject(Generic[T]):
    """An object that is already resident in memory."""

    obj: T


ObjectRef = ById[T] | ByObject[T]


async def resolve(ref: ById[T] | ByObject[T], load: Loader) -> T:
    """Return the referenced object, loading it when the reference is by id.

    A ``ById`` reference costs exactly one ``load`` call; nothing is cached,
    so callers that want sharing keep the result (see ``materialize``).
    """
    if isinstance(ref, ByObject):
        return ref.obj
    logger.debug("Materializing %s", ref.oid.hex)
    obj = await load(ref.oid)
    if obj is None:
        raise ObjectLookupFailed(ref.oid)
    return obj


async def materialize(ref: ById[T] | ByObject[T], load: Loader) -> ByObject[T]:
    """Resolve *ref* and wrap the result so it can be stored back in a tree."""
    if isinstance(ref, ByObject):
        return ref
    return ByObject(await resolve(ref, load))
