"""
===============================================================================
TARJETA CRC — longdoc/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Mantener contexto “request-scoped” usando ContextVars (async-safe).
  - Permitir correlación de logs/métricas sin pasar parámetros por todo el stack.
  - Proveer helpers mínimos: bind_pipeline_context(), get_context_dict().

Colaboradores:
  - longdoc.application.long_document_pipeline: bindea request_id/documento
    al inicio de cada ejecución y lo restaura al final.
  - longdoc.crosscutting.logger: enriquece logs leyendo get_context_dict().

Patrones aplicados:
  - Ambient Context (controlado y explícito).
  - Async-safe “thread-local” (ContextVar).

Restricciones:
  - Solo tipos primitivos (str) para serialización segura.
  - Defaults vacíos ("") para evitar None y simplificar JSON.
===============================================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Final, Iterator

# =============================================================================
# ContextVars: cada variable representa un dato correlacionable del request
# =============================================================================

# Identificador de request (idealmente UUID o ID estable del caller).
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Nombre visible del documento en proceso.
document_name_var: ContextVar[str] = ContextVar("document_name", default="")

# Claves estándar (para consistencia al construir dicts).
_CTX_REQUEST_ID: Final[str] = "request_id"
_CTX_DOCUMENT_NAME: Final[str] = "document_name"


# =============================================================================
# API pública (usada por logger/pipeline)
# =============================================================================


@contextmanager
def bind_pipeline_context(
    *, request_id: str = "", document_name: str = ""
) -> Iterator[None]:
    """
    Setea el contexto del request durante el bloque y lo restaura al salir.

    Regla:
      - Strings vacíos significan “no disponible”.
      - Se usan tokens de ContextVar: requests concurrentes no se pisan.
    """
    request_token = request_id_var.set(request_id or "")
    document_token = document_name_var.set(document_name or "")
    try:
        yield
    finally:
        document_name_var.reset(document_token)
        request_id_var.reset(request_token)


def get_context_dict() -> dict[str, str]:
    """
    Devuelve el contexto actual como dict, omitiendo claves vacías.
    """
    ctx: dict[str, str] = {}

    if val := request_id_var.get():
        ctx[_CTX_REQUEST_ID] = val
    if val := document_name_var.get():
        ctx[_CTX_DOCUMENT_NAME] = val

    return ctx


def clear_context() -> None:
    """Limpia el contexto (útil en tests o al final de un job)."""
    request_id_var.set("")
    document_name_var.set("")
