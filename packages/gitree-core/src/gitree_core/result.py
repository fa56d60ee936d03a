"""Success/failure values threaded through tree modification.

``modify_tree`` keeps two layers apart: the outer ``Ok``/``Err`` says whether
the caller's transform accepted the change, and the value inside ``Ok`` says
what to do at the target name (an entry to upsert, or ``None`` to delete).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self):
        raise RuntimeError(f"unwrap() called on Err({self.error!r})")


Result = Ok[T] | Err[E]
