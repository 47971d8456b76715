# infrastructure/imap/scanner.py
"""
Escáner de bytes sobre respuestas IMAP crudas.

No es un parser completo: acumula rachas alfabéticas y las compara (sin
distinguir mayúsculas) contra el token buscado cuando llega un byte no
alfabético. Así se ignora el "ruido" de FLAGS, INTERNALDATE, literales {N}...
"""
from __future__ import annotations
import logging

logger = logging.getLogger(__name__)

BODYSTRUCTURE = b"BODYSTRUCTURE"
UID = b"UID"
CRLF = b"\r\n"
# fin de una respuesta "* n FETCH (...)" con literal
FETCH_TERMINATOR = b"\r\n)\r\n"

_OPEN = ord("(")
_CLOSE = ord(")")
_SPACE = ord(" ")
_STAR = ord("*")


def ascii_lowercase_equal(a: bytes, b: bytes) -> bool:
    return a.lower() == b.lower()


def _is_alpha(byte: int) -> bool:
    return 0x41 <= byte <= 0x5A or 0x61 <= byte <= 0x7A


def _scan_bodystructures(buf: bytes, first_only: bool) -> list[bytes]:
    found: list[bytes] = []
    token = bytearray()
    current = bytearray()
    recording = False
    depth = 0

    for byte in buf:
        if not recording:
            if _is_alpha(byte):
                token.append(byte)
                continue
            hit = ascii_lowercase_equal(token, BODYSTRUCTURE)
            token.clear()
            if not hit:
                continue
            recording = True
            current = bytearray(BODYSTRUCTURE)

        if byte == _CLOSE and depth == 0:
            # token suelto: este ")" es el del FETCH que lo contiene
            found.append(BODYSTRUCTURE)
        else:
            current.append(byte)
            if byte == _OPEN:
                depth += 1
            elif byte == _CLOSE:
                depth -= 1
            if depth or byte != _CLOSE:
                continue
            found.append(bytes(current))
        if first_only:
            return found
        recording = False

    if recording:
        # sin cerrar: si nunca se abrió paréntesis queda solo el token
        found.append(bytes(current) if depth else BODYSTRUCTURE)
    elif ascii_lowercase_equal(token, BODYSTRUCTURE):
        found.append(BODYSTRUCTURE)
    return found


def extract_bodystructure(buf: bytes) -> bytes:
    """
    Devuelve b"BODYSTRUCTURE (...)" (la primera aparición, con paréntesis
    balanceados) o b"" si el token no aparece.
    """
    found = _scan_bodystructures(buf, first_only=True)
    return found[0] if found else b""


def extract_bodystructures(buf: bytes) -> list[bytes]:
    """Todas las apariciones, en orden (buffer con varios FETCH concatenados)."""
    return _scan_bodystructures(buf, first_only=False)


def find_uid_in_response(buf: bytes) -> bytes:
    """
    Copia los bytes que siguen al primer token "UID" hasta el siguiente espacio.
    Best-effort: asume que "UID <n>" aparece antes que cualquier valor que
    contenga otro "UID". Devuelve b"" si no hay UID terminado en espacio.
    """
    token = bytearray()
    uid = bytearray()
    recording = False

    for byte in buf:
        if recording:
            if byte == _SPACE:
                return bytes(uid)
            uid.append(byte)
            continue
        if _is_alpha(byte):
            token.append(byte)
            continue
        if ascii_lowercase_equal(token, UID):
            recording = True
        token.clear()

    return b""


def _split_one(buf: bytes, start: int, include_first_line: bool) -> tuple[bytes, int] | None:
    if start >= len(buf) or buf[start] != _STAR:
        return None
    body_start = start + 1
    end = buf.find(FETCH_TERMINATOR, body_start)
    if end < 0:
        return None
    if not include_first_line:
        # el terminador empieza por CRLF: la primera línea acaba como muy tarde ahí
        eol = buf.find(CRLF, body_start)
        body_start = min(eol + len(CRLF), end)
    return buf[body_start:end], end + len(FETCH_TERMINATOR)


def split_multi_fetch_response(buf: bytes, include_first_line: bool) -> list[bytes]:
    """
    Trocea respuestas "* n FETCH (...)\\r\\n)\\r\\n" concatenadas.

    include_first_line=True  -> cada trozo va desde justo después del "*" hasta
                                antes del terminador.
    include_first_line=False -> se quita además la primera línea (cabecera
                                "* n FETCH (... {N}\\r\\n") y queda solo el payload.

    Para en el primer trozo que no encaje (p.ej. la línea de estado etiquetada
    "a1 OK ..."). Lista vacía si no hay ninguna respuesta completa.
    """
    chunks: list[bytes] = []
    pos = 0
    while True:
        res = _split_one(buf, pos, include_first_line)
        if res is None:
            break
        chunk, pos = res
        chunks.append(chunk)
    if not chunks:
        logger.debug("Sin respuestas FETCH completas en %d bytes", len(buf))
    return chunks


def extract_fetch_response(buf: bytes) -> bytes | None:
    """Primer trozo en modo include_first_line=True, o None."""
    res = _split_one(buf, 0, include_first_line=True)
    return res[0] if res else None


def extract_fetch_payload(buf: bytes) -> bytes | None:
    """Primer trozo sin la línea de cabecera (solo el literal), o None."""
    res = _split_one(buf, 0, include_first_line=False)
    return res[0] if res else None
