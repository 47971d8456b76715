# domain/sequence.py
from __future__ import annotations
from collections import deque
from typing import Iterable, Iterator

from domain.errors import SequenceParseError


class Sequence:
    """
    Dirección de parte IMAP ("1.2.10") como cola de índices 1-based.
    Se consume por delante (pop_front) al descender por el árbol de Body.
    No valida el rango de los índices: eso lo hace MultiBody.set_data.
    """

    def __init__(self, indexes: Iterable[int]) -> None:
        self._items: deque[int] = deque(indexes)
        if not self._items:
            raise SequenceParseError("Sequence vacía")

    @classmethod
    def parse(cls, raw: bytes | str) -> "Sequence":
        if isinstance(raw, str):
            raw = raw.encode("ascii", errors="replace")
        if not raw:
            raise SequenceParseError("Sequence vacía")
        indexes: list[int] = []
        for segment in raw.split(b"."):
            # solo dígitos ASCII; int() aceptaría "+1" o " 1"
            if not segment or not segment.isdigit():
                raise SequenceParseError(f"Segmento no numérico en sequence {raw!r}")
            indexes.append(int(segment))
        return cls(indexes)

    def pop_front(self) -> int | None:
        if not self._items:
            return None
        return self._items.popleft()

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[int]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sequence):
            return NotImplemented
        return list(self._items) == list(other._items)

    def __str__(self) -> str:
        return ".".join(str(i) for i in self._items)

    def __bytes__(self) -> bytes:
        return str(self).encode("ascii")

    def __repr__(self) -> str:
        return f"Sequence({str(self)!r})"
