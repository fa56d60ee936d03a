"""Content identities: full object ids and partial (prefix) ids."""

from __future__ import annotations

import re
from dataclasses import dataclass

_HEX_RE = re.compile(r"[0-9a-f]{4,64}")

# SHA-1 and SHA-256 hex lengths
FULL_HEX_LENGTHS = frozenset({40, 64})


@dataclass(frozen=True)
class Oid:
    """A hash-derived object id; partial when shorter than a full hash."""

    hex: str

    def __post_init__(self) -> None:
        if not _HEX_RE.fullmatch(self.hex):
            raise ValueError(f"oid must be 4-64 lower-case hex chars, got {self.hex!r}")

    @classmethod
    def parse(cls, value: str | bytes) -> Oid:
        if isinstance(value, bytes):
            try:
                value = value.decode("ascii")
            except UnicodeDecodeError as e:
                raise ValueError(f"oid is not ASCII: {value!r}") from e
        return cls(value.strip().lower())

    @property
    def is_full(self) -> bool:
        return len(self.hex) in FULL_HEX_LENGTHS

    @property
    def is_partial(self) -> bool:
        return not self.is_full

    @property
    def short(self) -> str:
        return self.hex[:7]

    def to_bytes(self) -> bytes:
        return self.hex.encode("ascii")

    def __str__(self) -> str:
        return self.hex
