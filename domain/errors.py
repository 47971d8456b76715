# domain/errors.py
from __future__ import annotations


class BodystructureError(Exception):
    """Error base de la librería: mensaje legible + código estable."""
    error_code = "bodystructure_error"

    def __init__(self, message: str, error_code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code


class SequenceParseError(BodystructureError):
    """Ruta de parte (p.ej. "1.2.10") vacía o con segmentos no numéricos."""
    error_code = "invalid_sequence"


class GrammarMismatchError(BodystructureError):
    """El texto BODYSTRUCTURE no encaja ni como SingleBody ni como MultiBody."""
    error_code = "grammar_mismatch"

    def __init__(self, message: str, position: int = 0) -> None:
        super().__init__(f"{message} (pos={position})")
        self.position = position


class CommandParseError(BodystructureError):
    """La línea no es un `UID FETCH <uid> BODY[.PEEK][<seq>]`."""
    error_code = "invalid_command"
