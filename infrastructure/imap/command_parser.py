# infrastructure/imap/command_parser.py
from __future__ import annotations
import re

from domain.errors import CommandParseError, SequenceParseError
from domain.models import UidFetch
from domain.sequence import Sequence

# "<tag> UID FETCH <uid> BODY[.PEEK][<seq>]"
UID_FETCH_BODY_RE = re.compile(
    rb"^(?P<tag>[A-Za-z0-9]+) UID FETCH (?P<uid>\d+) BODY(?:\.PEEK)?\[(?P<seq>[\d.]*)\]",
    re.IGNORECASE,
)
# "<tag> [UID] FETCH <n> BODY[.PEEK][]" (mensaje completo)
FETCH_ALL_BODY_RE = re.compile(
    rb"^[A-Za-z0-9]+(?: UID)? FETCH \d+ BODY(?:\.PEEK)?\[\]",
    re.IGNORECASE,
)


def uid_fetch_body_parser(line: bytes | str) -> UidFetch:
    """
    Recupera (uid, sequence) de un comando "a5 UID FETCH 303416 BODY.PEEK[1.1]".
    Lanza CommandParseError si la línea no tiene esa forma o la sección no es
    una ruta de partes válida (p.ej. BODY[] o BODY[HEADER]).
    """
    if isinstance(line, str):
        line = line.encode("ascii", errors="replace")
    m = UID_FETCH_BODY_RE.match(line)
    if not m:
        raise CommandParseError(f"No es un UID FETCH BODY[...]: {line[:80]!r}")
    try:
        sequence = Sequence.parse(m.group("seq"))
    except SequenceParseError as e:
        raise CommandParseError(f"Sección no válida en {line[:80]!r}: {e.message}") from e
    return UidFetch(uid=m.group("uid"), sequence=sequence)


def is_fetch_all_body(line: bytes | str) -> bool:
    """True para "<tag> [UID] FETCH <n> BODY[.PEEK][]" (mensaje entero)."""
    if isinstance(line, str):
        line = line.encode("ascii", errors="replace")
    return FETCH_ALL_BODY_RE.match(line) is not None
