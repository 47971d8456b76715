# application/use_cases/assemble_bodystructures_usecase.py
from __future__ import annotations
import logging
from typing import Any

from config.settings import Settings
from domain.errors import GrammarMismatchError
from domain.models import Body
from infrastructure.imap.bodystructure_parser import head_bodystructure, parse_body
from infrastructure.imap.scanner import (
    extract_bodystructure,
    find_uid_in_response,
    split_multi_fetch_response,
)
from utils.log_capture import BatchLogCapture

logger = logging.getLogger(__name__)


def delete_first_line(data: bytes) -> bytes:
    """Todo lo que va tras el primer "\\n" (o el buffer entero si no hay)."""
    idx = data.find(b"\n")
    return data if idx < 0 else data[idx + 1:]


class AssembleBodystructuresUseCase:
    """
    Recorre un buffer con varias respuestas "* n FETCH (...)" y construye el
    mapa UID -> Body. Una respuesta que no encaja se salta y se anota en
    "skipped"; nunca aborta el lote.
    """

    def __init__(self, *, attach_headers: bool = False, capture_log: bool = True) -> None:
        self.attach_headers = attach_headers
        self.capture_log = capture_log

    @classmethod
    def from_settings(cls, settings: Settings) -> "AssembleBodystructuresUseCase":
        return cls(
            attach_headers=settings.BODYSTRUCTURE_ATTACH_HEADERS,
            capture_log=settings.BODYSTRUCTURE_CAPTURE_LOG,
        )

    def _assemble_one(self, response: bytes, skipped: list[str]) -> tuple[bytes, Body] | None:
        uid = find_uid_in_response(response)
        if not uid:
            skipped.append("sin UID")
            logger.warning("Respuesta sin UID; se salta: %r", response[:60])
            return None

        text = extract_bodystructure(response)
        if not text:
            skipped.append(f"UID={uid.decode('ascii', 'replace')}: sin BODYSTRUCTURE")
            logger.warning("UID=%s sin BODYSTRUCTURE; se salta", uid.decode("ascii", "replace"))
            return None

        try:
            tree = parse_body(head_bodystructure(text))
        except GrammarMismatchError as e:
            skipped.append(f"UID={uid.decode('ascii', 'replace')}: {e.message}")
            logger.warning("UID=%s BODYSTRUCTURE no válido (%s); se salta",
                           uid.decode("ascii", "replace"), e.message)
            return None

        if self.attach_headers:
            tree.set_header(delete_first_line(response))
        return uid, tree

    def _run(self, buf: bytes) -> tuple[dict[bytes, Body], list[str]]:
        bodies: dict[bytes, Body] = {}
        skipped: list[str] = []
        responses = split_multi_fetch_response(buf, include_first_line=True)
        for response in responses:
            res = self._assemble_one(response, skipped)
            if res is None:
                continue
            uid, tree = res
            bodies[uid] = tree
        logger.info("BODYSTRUCTURE: %d respuestas, %d árboles, %d saltadas",
                    len(responses), len(bodies), len(skipped))
        return bodies, skipped

    def run(self, buf: bytes) -> dict[str, Any]:
        """
        Devuelve: {
            "bodies": {uid: Body, ...},
            "skipped": ["motivo", ...],
            "log": "texto del log del lote" (vacío si capture_log=False)
        }
        """
        if not self.capture_log:
            bodies, skipped = self._run(buf)
            return {"bodies": bodies, "skipped": skipped, "log": ""}

        with BatchLogCapture() as cap:
            bodies, skipped = self._run(buf)
            log_text = cap.text()
        return {"bodies": bodies, "skipped": skipped, "log": log_text}


def find_all_bodystructure_with_uid(buf: bytes, attach_headers: bool = False) -> dict[bytes, Body]:
    """UID -> Body para cada respuesta del buffer con BODYSTRUCTURE válido."""
    usecase = AssembleBodystructuresUseCase(attach_headers=attach_headers, capture_log=False)
    return usecase.run(buf)["bodies"]
