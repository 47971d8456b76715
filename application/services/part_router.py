# application/services/part_router.py
from __future__ import annotations
import logging

from domain.errors import CommandParseError
from domain.models import Body
from infrastructure.imap.command_parser import uid_fetch_body_parser
from infrastructure.imap.scanner import extract_fetch_payload

logger = logging.getLogger(__name__)


def attach_fetched_part(bodies: dict[bytes, Body], command: bytes, response: bytes) -> bool:
    """
    Asocia el literal de una respuesta "UID FETCH <uid> BODY[<seq>]" a la hoja
    correspondiente del árbol de ese UID. False si no se pudo (ya registrado).
    """
    try:
        fetch = uid_fetch_body_parser(command)
    except CommandParseError as e:
        logger.warning("Comando no reconocido: %s", e.message)
        return False

    uid = fetch.uid.decode("ascii", "replace")
    tree = bodies.get(fetch.uid)
    if tree is None:
        logger.warning("UID=%s sin BODYSTRUCTURE previo", uid)
        return False

    payload = extract_fetch_payload(response)
    if payload is None:
        logger.warning("UID=%s: respuesta FETCH incompleta (%d bytes)", uid, len(response))
        return False

    section = str(fetch.sequence)
    if not tree.set_data(fetch.sequence, payload):
        logger.warning("UID=%s: sección %s no existe en el árbol", uid, section)
        return False
    logger.debug("UID=%s: sección %s (%d bytes) asignada", uid, section, len(payload))
    return True


def incomplete_uids(bodies: dict[bytes, Body]) -> list[bytes]:
    """UIDs a los que todavía les falta alguna parte."""
    return [uid for uid, tree in bodies.items() if not tree.are_all_bodies_with_data()]
