# config/settings.py
from __future__ import annotations
from dataclasses import dataclass
import logging
import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


@dataclass(frozen=True)
class Settings:
    # Ensamblado de respuestas FETCH
    BODYSTRUCTURE_ATTACH_HEADERS: bool = _env_bool("BODYSTRUCTURE_ATTACH_HEADERS", "false")
    BODYSTRUCTURE_CAPTURE_LOG: bool = _env_bool("BODYSTRUCTURE_CAPTURE_LOG", "true")

    # Logging (solo si la aplicación que embebe la librería lo pide)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", DEFAULT_LOG_FORMAT)

    # ───────── helpers ─────────
    def log_level(self) -> int:
        level = logging.getLevelName(self.LOG_LEVEL)
        return level if isinstance(level, int) else logging.INFO

    def configure_logging(self) -> None:
        logging.basicConfig(level=self.log_level(), format=self.LOG_FORMAT)
