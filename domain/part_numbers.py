# domain/part_numbers.py
from __future__ import annotations


class PartNumberCounter:
    """
    Calcula el número de parte IMAP de la posición actual mientras se recorre
    un texto BODYSTRUCTURE byte a byte:
        "("  -> next_level()
        ")"  -> previous_level()
    as_bytes() devuelve los niveles abiertos unidos por "." (b"1.1.2").

    Al cerrar un nivel se conserva su contador (como máximo uno por encima de
    la profundidad actual), así el siguiente hermano incrementa en vez de
    reiniciar en 1.
    """

    def __init__(self) -> None:
        self._counters: list[int] = []
        self._depth = 0

    @property
    def depth(self) -> int:
        return self._depth

    def next_level(self) -> None:
        if self._depth < len(self._counters):
            # hermano de una parte ya cerrada a esta profundidad
            self._counters[self._depth] += 1
        else:
            self._counters.append(1)
        self._depth += 1

    def previous_level(self) -> None:
        if self._depth == 0:
            return
        if self._depth < len(self._counters):
            self._counters.pop()
        self._depth -= 1

    def feed(self, data: bytes) -> "PartNumberCounter":
        for b in data:
            if b == 0x28:  # (
                self.next_level()
            elif b == 0x29:  # )
                self.previous_level()
        return self

    def as_str(self) -> str:
        return ".".join(str(n) for n in self._counters[: self._depth])

    def as_bytes(self) -> bytes:
        return self.as_str().encode("ascii")
