# longdoc/crosscutting/logger.py
"""
===============================================================================
MÓDULO: Logger JSON del pipeline (eventos + contexto de request)
===============================================================================

Objetivo
--------
Cada línea de log es un objeto JSON con:
- metadatos del record (ts, level, logger, msg, origen)
- el evento del pipeline (`event`) si lo hay
- contexto de request (request_id / document_name)
- los campos `extra` saneados

Contenido de documentos
-----------------------
El texto de los segmentos, prompts y respuestas nunca se vuelca al log: las
claves de contenido se reemplazan por su largo (`<1234 chars>`). Las claves
de credenciales se ocultan y cualquier otro string largo se recorta.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  _FieldSanitizer + JSONFormatter + setup_logger()

Colaboradores:
  - longdoc/context.py (get_context_dict)
  - crosscutting/config.py (log_level, log_json)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Final

LOGGER_NAME: Final[str] = "longdoc"

# Atributos estándar de LogRecord: no son "extra".
_RESERVED_ATTRS: Final[frozenset[str]] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

_SECRET_KEYS: Final[frozenset[str]] = frozenset(
    {
        "api_key",
        "apikey",
        "x-api-key",
        "anthropic_api_key",
        "google_api_key",
        "authorization",
        "token",
        "secret",
        "password",
    }
)

# Claves que transportan texto del documento o del modelo.
_CONTENT_KEYS: Final[frozenset[str]] = frozenset(
    {
        "text",
        "content",
        "segment_text",
        "user_message",
        "system_instruction",
        "prompt",
        "answer",
    }
)

_HIDDEN: Final[str] = "[hidden]"


class _FieldSanitizer:
    """
    Sanea valores de `extra` antes de serializarlos.

    Reglas (en orden): secretos → ocultos, contenido → largo, profundidad
    máxima, strings recortados, enums → valor, resto → JSON o `str()`.
    """

    def __init__(self, max_chars: int = 2_000, max_depth: int = 4):
        self.max_chars = max_chars
        self.max_depth = max_depth

    def clean(self, value: Any, key: str = "", depth: int = 0) -> Any:
        lowered = key.lower()
        if lowered in _SECRET_KEYS:
            return _HIDDEN
        if lowered in _CONTENT_KEYS and isinstance(value, str):
            return f"<{len(value)} chars>"
        if depth > self.max_depth:
            return "<max depth>"

        if isinstance(value, str):
            if len(value) > self.max_chars:
                return f"{value[: self.max_chars]}... [+{len(value) - self.max_chars} chars]"
            return value
        if isinstance(value, (bytes, bytearray)):
            return f"<{len(value)} bytes>"
        if isinstance(value, dict):
            return {str(k): self.clean(v, str(k), depth + 1) for k, v in value.items()}
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self.clean(item, key, depth + 1) for item in value]

        # Enums (BackendErrorKind, PipelineStage, ...)
        inner = getattr(value, "value", None)
        if isinstance(inner, (str, int)):
            return inner

        try:
            json.dumps(value)
        except (TypeError, ValueError):
            return str(value)
        return value


class JSONFormatter(logging.Formatter):
    """LogRecord → una línea JSON (ver docstring del módulo)."""

    def __init__(self, sanitizer: _FieldSanitizer | None = None):
        super().__init__()
        self._sanitizer = sanitizer or _FieldSanitizer()

    def format(self, record: logging.LogRecord) -> str:
        from ..context import get_context_dict

        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "origin": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(get_context_dict())

        extras = {
            k: self._sanitizer.clean(v, k)
            for k, v in vars(record).items()
            if k not in _RESERVED_ATTRS and not k.startswith("_")
        }
        entry.update(extras)

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "stacktrace": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


def _level_and_format() -> tuple[int, bool]:
    """Nivel + toggle JSON desde Settings; defaults si la config es inválida."""
    try:
        from .config import get_settings

        settings = get_settings()
    except ValueError:
        # Config inválida (p.ej. falta API key): igual hay que poder loguear.
        return logging.INFO, True
    level = logging.getLevelName((settings.log_level or "INFO").upper())
    return (level if isinstance(level, int) else logging.INFO), settings.log_json


def setup_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Configura el logger del paquete (idempotente: un único handler)."""
    log = logging.getLogger(name)
    level, use_json = _level_and_format()
    log.setLevel(level)

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = (
            JSONFormatter()
            if use_json
            else logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        handler.setFormatter(formatter)
        log.addHandler(handler)

    return log


logger = setup_logger()
