"""Exception hierarchy for tree lookup, mutation and persistence."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitree_core.oid import Oid


class GitreeError(Exception):
    """Base class for every failure raised by gitree_core."""


class InvalidOidForReference(GitreeError):
    """A by-id reference was requested for a partial (prefix) object id."""

    def __init__(self, oid: Oid) -> None:
        self.oid = oid
        super().__init__(f"object reference requires a full id, got prefix {oid.hex!r}")


# Older name for the same error.
ObjectRefRequiresFullOid = InvalidOidForReference


class ObjectLookupFailed(GitreeError):
    """A by-id reference could not be materialized from the store."""

    def __init__(self, oid: Oid, reason: str = "not found", cause: Exception | None = None) -> None:
        self.oid = oid
        self.reason = reason
        super().__init__(f"lookup of {oid.hex} failed: {reason}")
        if cause is not None:
            self.__cause__ = cause


class TreeCannotTraverseBlob(GitreeError):
    """A path descended through a blob entry as though it were a directory."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"cannot traverse blob entry {name!r}")


class TreeLookupFailed(GitreeError):
    """A required tree was absent, or a structural precondition was violated."""

    def __init__(self, reason: str, name: str | None = None) -> None:
        self.reason = reason
        self.name = name
        msg = f"tree lookup failed: {reason}"
        if name:
            msg += f" ({name!r})"
        super().__init__(msg)


class _BuilderError(GitreeError):
    operation = "builder"

    def __init__(self, detail: str = "", cause: Exception | None = None) -> None:
        self.detail = detail
        msg = f"tree builder {self.operation} failed"
        if detail:
            msg += f": {detail}"
        if cause is not None:
            msg += f" ({cause})"
        super().__init__(msg)
        if cause is not None:
            self.__cause__ = cause


class TreeBuilderCreateFailed(_BuilderError):
    """The store could not hand out a tree builder."""

    operation = "create"


class TreeBuilderInsertFailed(_BuilderError):
    """The builder rejected a (name, id, mode) triple."""

    operation = "insert"


class TreeBuilderWriteFailed(_BuilderError):
    """The builder could not write the finished tree to the store."""

    operation = "write"


class BlobWriteFailed(GitreeError):
    """The store could not write blob content."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"blob write failed: {cause}")
        self.__cause__ = cause


class InvalidPathError(GitreeError):
    """A path could not be decoded or split into valid components."""

    def __init__(self, path: object, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"invalid path {path!r}: {reason}")
