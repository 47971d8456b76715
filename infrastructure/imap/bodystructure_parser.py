# infrastructure/imap/bodystructure_parser.py
"""
Parser descendente recursivo del texto BODYSTRUCTURE (RFC 3501 §7.4.2).

Cada regla recibe (texto, pos) y devuelve (valor, nueva_pos) o lanza
_Mismatch. El texto es inmutable y cada alternativa trabaja sobre su propia
posición, así un intento fallido (SingleBody) no ensucia el siguiente
(MultiBody).

    body        := "(" body+ SP subtype [SP params [SP dsp [SP lang [SP loc]]]] ")"
                 | "(" type SP subtype SP params SP id SP desc SP enc SP size
                       [SP md5 [SP dsp [SP lang [SP loc]]]] ")"
    nstring     := '"' bytes-sin-comillas '"' | NIL
    params      := "(" nstring SP nstring (SP nstring SP nstring)* ")" | NIL
    size        := number [SP number] | NIL
    dsp         := "(" nstring SP params ")" | NIL
    lang        := nstring | "(" nstring (SP nstring)* ")"

Las palabras clave (NIL, BODYSTRUCTURE) no distinguen mayúsculas.
"""
from __future__ import annotations
import logging
from typing import Callable, TypeVar

from domain.errors import GrammarMismatchError
from domain.models import (
    Body,
    ContentDisposition,
    ContentSize,
    ContentTypeTypeAndSubType,
    MultiBody,
    Parameter,
    Parameters,
    SingleBody,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
Rule = Callable[[bytes, int], tuple]

_QUOTE = 0x22
_SPACE = 0x20
_OPEN = 0x28
_CLOSE = 0x29
_NIL = b"NIL"
_HEAD = b"BODYSTRUCTURE"
# niveles de multipart anidados; por encima el texto se rechaza como no válido
MAX_NESTING = 100


class _Mismatch(Exception):
    def __init__(self, pos: int, expected: str) -> None:
        super().__init__(expected)
        self.pos = pos
        self.expected = expected


def _furthest(a: _Mismatch, b: _Mismatch) -> _Mismatch:
    return b if b.pos >= a.pos else a


# ───────────────────────── primitivas ─────────────────────────

def _byte(s: bytes, pos: int, value: int, expected: str) -> int:
    if pos >= len(s) or s[pos] != value:
        raise _Mismatch(pos, expected)
    return pos + 1


def _sp(s: bytes, pos: int) -> int:
    pos = _byte(s, pos, _SPACE, "' '")
    while pos < len(s) and s[pos] == _SPACE:
        pos += 1
    return pos


def _skip_spaces(s: bytes, pos: int) -> int:
    while pos < len(s) and s[pos] == _SPACE:
        pos += 1
    return pos


def _is_nil(s: bytes, pos: int) -> bool:
    return s[pos:pos + 3].upper() == _NIL


def quoted_string(s: bytes, pos: int) -> tuple[bytes, int]:
    start = _byte(s, pos, _QUOTE, "'\"'")
    end = s.find(b'"', start)
    if end < 0:
        raise _Mismatch(start, "comilla de cierre")
    return s[start:end], end + 1


def nstring(s: bytes, pos: int) -> tuple[bytes | None, int]:
    if _is_nil(s, pos):
        return None, pos + 3
    return quoted_string(s, pos)


def number(s: bytes, pos: int) -> tuple[int, int]:
    end = pos
    while end < len(s) and 0x30 <= s[end] <= 0x39:
        end += 1
    if end == pos:
        raise _Mismatch(pos, "número")
    return int(s[pos:end]), end


def _optional(rule: Rule, s: bytes, pos: int, default: T) -> tuple[T, int]:
    """[SP rule]: si no encaja se deja la posición como estaba."""
    try:
        start = _sp(s, pos)
        return rule(s, start)
    except _Mismatch:
        return default, pos


# ───────────────────────── campos ─────────────────────────

def parameter(s: bytes, pos: int) -> tuple[Parameter, int]:
    attribute, pos = nstring(s, pos)
    pos = _sp(s, pos)
    value, pos = nstring(s, pos)
    return Parameter(attribute=attribute or b"", value=value or b""), pos


def parameters(s: bytes, pos: int) -> tuple[Parameters, int]:
    if _is_nil(s, pos):
        return Parameters(), pos + 3
    pos = _byte(s, pos, _OPEN, "'(' de parámetros")
    items: list[Parameter] = []
    pos = _skip_spaces(s, pos)
    while pos < len(s) and s[pos] != _CLOSE:
        if items:
            pos = _sp(s, pos)
        item, pos = parameter(s, pos)
        items.append(item)
    pos = _byte(s, pos, _CLOSE, "')' de parámetros")
    return Parameters(items), pos


def content_type_main(s: bytes, pos: int) -> tuple[ContentTypeTypeAndSubType, int]:
    ttype, pos = quoted_string(s, pos)
    pos = _sp(s, pos)
    subtype, pos = quoted_string(s, pos)
    return ContentTypeTypeAndSubType(ttype=ttype, subtype=subtype), pos


def content_size(s: bytes, pos: int) -> tuple[ContentSize, int]:
    if _is_nil(s, pos):
        return ContentSize(None, None), pos + 3
    octets, pos = number(s, pos)
    # líneas: solo en text/* (y solo si lo siguiente es un número)
    lines, pos = _optional(number, s, pos, None)
    return ContentSize(octets, lines), pos


def content_disposition(s: bytes, pos: int) -> tuple[ContentDisposition, int]:
    if _is_nil(s, pos):
        return ContentDisposition(), pos + 3
    pos = _byte(s, pos, _OPEN, "'(' de disposition")
    value, pos = nstring(s, pos)
    pos = _sp(s, pos)
    params, pos = parameters(s, pos)
    pos = _byte(s, pos, _CLOSE, "')' de disposition")
    return ContentDisposition(value=value, parameters=params), pos


def content_language(s: bytes, pos: int) -> tuple[bytes | None, int]:
    if pos < len(s) and s[pos] == _OPEN:
        pos += 1
        langs: list[bytes] = []
        while True:
            lang, pos = nstring(s, pos)
            if lang is not None:
                langs.append(lang)
            if pos < len(s) and s[pos] == _CLOSE:
                return b", ".join(langs) or None, pos + 1
            pos = _sp(s, pos)
    return nstring(s, pos)


def _extensions(s: bytes, pos: int) -> tuple[tuple[ContentDisposition, bytes | None, bytes | None], int]:
    """[SP dsp [SP lang [SP loc]]]; los que falten quedan por defecto."""
    disposition, pos = _optional(content_disposition, s, pos, ContentDisposition())
    language, pos = _optional(content_language, s, pos, None)
    location, pos = _optional(nstring, s, pos, None)
    return (disposition, language, location), pos


# ───────────────────────── cuerpos ─────────────────────────

def single_body(s: bytes, pos: int) -> tuple[SingleBody, int]:
    pos = _byte(s, pos, _OPEN, "'(' de body")
    ctype, pos = content_type_main(s, pos)
    pos = _sp(s, pos)
    params, pos = parameters(s, pos)
    pos = _sp(s, pos)
    content_id, pos = nstring(s, pos)
    pos = _sp(s, pos)
    description, pos = nstring(s, pos)
    pos = _sp(s, pos)
    encoding, pos = quoted_string(s, pos)
    pos = _sp(s, pos)
    size, pos = content_size(s, pos)

    md5, after_md5 = _optional(nstring, s, pos, None)
    if after_md5 != pos:
        (disposition, language, location), pos = _extensions(s, after_md5)
    else:
        disposition, language, location = ContentDisposition(), None, None

    pos = _byte(s, _skip_spaces(s, pos), _CLOSE, "')' de body")
    return SingleBody(
        content_type=ctype,
        parameters=params,
        content_id=content_id,
        content_description=description,
        content_transfer_encoding=encoding,
        content_size=size,
        content_md5=md5,
        content_disposition=disposition,
        content_language=language,
        content_location=location,
    ), pos


def multi_body(s: bytes, pos: int, depth: int = 0) -> tuple[MultiBody, int]:
    pos = _byte(s, pos, _OPEN, "'(' de multipart")
    parts: list[Body] = []
    while True:
        part, pos = body(s, pos, depth + 1)
        parts.append(part)
        nxt = _skip_spaces(s, pos)
        if nxt >= len(s) or s[nxt] != _OPEN:
            break
        pos = nxt

    pos = _sp(s, pos)
    subtype, pos = quoted_string(s, pos)
    params, pos = _optional(parameters, s, pos, Parameters())
    (disposition, language, location), pos = _extensions(s, pos)
    pos = _byte(s, _skip_spaces(s, pos), _CLOSE, "')' de multipart")
    return MultiBody(
        parts=parts,
        content_type=subtype,
        parameters=params,
        content_disposition=disposition,
        content_language=language,
        content_location=location,
    ), pos


def body(s: bytes, pos: int, depth: int = 0) -> tuple[Body, int]:
    if depth > MAX_NESTING:
        raise _Mismatch(pos, f"como mucho {MAX_NESTING} niveles de anidamiento")
    try:
        return single_body(s, pos)
    except _Mismatch as single_err:
        logger.debug("No es SingleBody en pos=%d (%s); probando MultiBody", single_err.pos, single_err.expected)
        try:
            return multi_body(s, pos, depth)
        except _Mismatch as multi_err:
            raise _furthest(single_err, multi_err) from None


# ───────────────────────── API pública ─────────────────────────

def head_bodystructure(text: bytes) -> bytes:
    """Quita el token "BODYSTRUCTURE " inicial y devuelve el resto."""
    if text[:len(_HEAD)].upper() != _HEAD:
        raise GrammarMismatchError("Falta el token BODYSTRUCTURE", 0)
    try:
        pos = _sp(text, len(_HEAD))
    except _Mismatch as err:
        raise GrammarMismatchError("Se esperaba ' ' tras BODYSTRUCTURE", err.pos) from None
    return text[pos:]


def parse_body(text: bytes) -> Body:
    """
    Convierte "(...)" (sin el token BODYSTRUCTURE) en un árbol de Body.
    Lanza GrammarMismatchError si no encaja con ninguna de las dos formas.
    """
    text = text.strip()
    try:
        tree, pos = body(text, 0)
    except _Mismatch as err:
        raise GrammarMismatchError(f"BODYSTRUCTURE no válido: se esperaba {err.expected}", err.pos) from None
    if pos != len(text):
        raise GrammarMismatchError("Sobran bytes tras el BODYSTRUCTURE", pos)
    return tree


def parse_bodystructure(text: bytes) -> Body:
    """Igual que parse_body pero acepta el texto con el token "BODYSTRUCTURE " delante."""
    return parse_body(head_bodystructure(text))
