# utils/log_capture.py

from __future__ import annotations
import io
import logging

from config.settings import DEFAULT_LOG_FORMAT


class BatchLogCapture:
    """
    Captura temporal del log de un logger (por defecto la raíz) en un buffer
    en memoria, para adjuntarlo al informe de un lote de respuestas FETCH.
    Uso:
        with BatchLogCapture("application") as cap:
            ... # ensamblar lote
            text = cap.text()
    """
    def __init__(self, logger_name: str | None = None, level: int = logging.INFO) -> None:
        self.logger_name = logger_name
        self.level = level
        self.buffer = io.StringIO()
        self.handler = logging.StreamHandler(self.buffer)
        self.handler.setLevel(level)
        self.handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))

    def __enter__(self) -> "BatchLogCapture":
        target = logging.getLogger(self.logger_name)
        self._prev_level = target.level
        target.setLevel(min(self._prev_level, self.level) if self._prev_level else self.level)
        target.addHandler(self.handler)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        target = logging.getLogger(self.logger_name)
        try:
            target.removeHandler(self.handler)
            target.setLevel(self._prev_level)
        finally:
            self.handler.close()

    def text(self) -> str:
        return self.buffer.getvalue()
