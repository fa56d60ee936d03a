"""Turning slash-separated paths into tree name components."""

from __future__ import annotations

import os
from collections.abc import Sequence

from gitree_core.errors import InvalidPathError

SEPARATOR = "/"

PathLike = str | bytes | os.PathLike | Sequence[str]


def split_path(path: PathLike) -> list[str]:
    """Split *path* into components, validating each one.

    ``""`` and ``"/"`` give the empty path. A single leading or trailing
    separator is ignored; empty inner components are rejected.
    """
    if isinstance(path, os.PathLike):
        path = os.fspath(path)
    if isinstance(path, bytes):
        try:
            path = path.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidPathError(path, "not valid UTF-8") from e

    if isinstance(path, str):
        text = path
        if text.startswith(SEPARATOR):
            text = text[1:]
        if text.endswith(SEPARATOR):
            text = text[:-1]
        names = text.split(SEPARATOR) if text else []
    else:
        names = list(path)

    for name in names:
        if not isinstance(name, str):
            raise InvalidPathError(path, f"component {name!r} is not a string")
        if not name:
            raise InvalidPathError(path, "empty path component")
        if SEPARATOR in name or "\0" in name:
            raise InvalidPathError(path, f"component {name!r} contains '/' or NUL")
    return names
