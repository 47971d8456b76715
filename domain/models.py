# domain/models.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterator, NamedTuple, Optional, Union

from domain.sequence import Sequence

logger = logging.getLogger(__name__)

CRLF = b"\r\n"
# continuación de parámetros: ";\r\n" + 8 espacios + attr="value"
PARAM_INDENT = b"        "


@dataclass(frozen=True)
class Parameter:
    attribute: bytes
    value: bytes

    def get_content_type_text(self) -> bytes:
        return self.attribute + b'="' + self.value + b'"'


@dataclass
class Parameters:
    """Lista ordenada (orden de la gramática); no se deduplica."""
    items: list[Parameter] = field(default_factory=list)

    def get(self, attribute: bytes) -> bytes | None:
        wanted = attribute.lower()
        for p in self.items:
            if p.attribute.lower() == wanted:
                return p.value
        return None

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class ContentTypeTypeAndSubType:
    ttype: bytes
    subtype: bytes

    def get_content_type_text(self) -> bytes:
        return self.ttype + b"/" + self.subtype


class ContentSize(NamedTuple):
    octets: Optional[int] = None
    lines: Optional[int] = None  # solo en tipos text/*


@dataclass
class ContentDisposition:
    value: bytes | None = None
    parameters: Parameters = field(default_factory=Parameters)


def _header_line(name: bytes, value: bytes | None) -> bytes:
    if value is None:
        return b""
    return name + b": " + value + CRLF


def _header_with_params(name: bytes, value: bytes | None, params: Parameters) -> bytes:
    if value is None:
        return b""
    out = name + b": " + value
    for p in params:
        out += b";" + CRLF + PARAM_INDENT + p.get_content_type_text()
    return out + CRLF


@dataclass
class SingleBody:
    content_type: ContentTypeTypeAndSubType
    parameters: Parameters = field(default_factory=Parameters)
    content_id: bytes | None = None
    content_description: bytes | None = None
    content_transfer_encoding: bytes = b""
    content_size: ContentSize = field(default_factory=ContentSize)
    content_md5: bytes | None = None
    content_disposition: ContentDisposition = field(default_factory=ContentDisposition)
    content_language: bytes | None = None
    content_location: bytes | None = None
    data: bytes = b""
    raw_header: bytes = b""

    def set_data(self, sequence: Sequence, data: bytes) -> bool:
        # Una parte no-multipart solo tiene la subparte "1" (RFC 3501 §6.4.5):
        # los ".1" sobrantes se absorben aquí, cualquier otro índice no existe.
        # No se absorbe una ruta sobrante arbitraria: "1.3" sobre un mixed de
        # una sola parte devuelve False.
        if any(i != 1 for i in sequence):
            logger.debug("Ruta sobrante %s no existe bajo %s", sequence,
                         self.content_type.get_content_type_text())
            return False
        while not sequence.is_empty():
            sequence.pop_front()
        self.data = data
        return True

    def set_header(self, header: bytes) -> None:
        self.raw_header += header

    def are_all_bodies_with_data(self) -> bool:
        return bool(self.data)

    def get_mime_headers(self) -> bytes:
        disp = self.content_disposition
        return b"".join((
            _header_with_params(b"Content-Type", self.content_type.get_content_type_text(), self.parameters),
            _header_line(b"Content-ID", self.content_id),
            _header_line(b"Content-Description", self.content_description),
            _header_line(b"Content-Transfer-Encoding", self.content_transfer_encoding),
            _header_line(b"Content-MD5", self.content_md5),
            _header_with_params(b"Content-Disposition", disp.value, disp.parameters),
            _header_line(b"Content-Language", self.content_language),
            _header_line(b"Content-Location", self.content_location),
        ))

    def get_text(self) -> bytes:
        return self.raw_header + CRLF + self.get_mime_headers() + CRLF + self.data + CRLF

    def walk(self) -> Iterator["Body"]:
        yield self


@dataclass
class MultiBody:
    parts: list["Body"]
    content_type: bytes  # subtipo multipart: b"mixed", b"related"...
    parameters: Parameters = field(default_factory=Parameters)
    content_disposition: ContentDisposition = field(default_factory=ContentDisposition)
    content_language: bytes | None = None
    content_location: bytes | None = None
    raw_header: bytes = b""

    def get_boundary(self) -> bytes:
        return self.parameters.get(b"boundary") or b""

    def set_data(self, sequence: Sequence, data: bytes) -> bool:
        index = sequence.pop_front()
        if index is None or not 1 <= index <= len(self.parts):
            logger.debug("Índice %s fuera de rango (multipart/%s con %d partes)",
                         index, self.content_type.decode("ascii", "replace"), len(self.parts))
            return False
        return self.parts[index - 1].set_data(sequence, data)

    def set_header(self, header: bytes) -> None:
        self.raw_header += header

    def are_all_bodies_with_data(self) -> bool:
        return all(p.are_all_bodies_with_data() for p in self.parts)

    def get_text(self) -> bytes:
        boundary = self.get_boundary()
        out = self.raw_header + _header_with_params(b"Content-Type", b"multipart/" + self.content_type, self.parameters)
        for part in self.parts:
            out += CRLF + b"--" + boundary + part.get_text()
        return out + CRLF + b"--" + boundary + CRLF

    def walk(self) -> Iterator["Body"]:
        yield self
        for part in self.parts:
            yield from part.walk()


Body = Union[SingleBody, MultiBody]


@dataclass
class UidFetch:
    uid: bytes
    sequence: Sequence
