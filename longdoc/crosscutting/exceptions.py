# longdoc/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del pipeline (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message “humana” (sin filtrar secretos)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  PipelineError + subclases

Responsabilidades:
  - Estandarizar errores que la capa llamadora puede mapear (HTTP, UI, etc.)
  - Clasificar fallas del backend de generación (BackendErrorKind)
  - Generar error_id para rastreo

Colaboradores:
  - infrastructure/services/* (levantan BackendError)
  - application/long_document_pipeline.py (levanta EmptyDocumentError)
  - crosscutting/logger.py
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import uuid4


@dataclass(frozen=True)
class ErrorResponse:
    """Estructura mínima para responder errores de forma consistente (si se necesita)."""

    error_code: str
    message: str
    error_id: str

    def to_dict(self) -> dict:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "error_id": self.error_id,
        }


class PipelineError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      PipelineError

    Responsabilidades:
      - Base para errores internos del pipeline
      - Proveer error_code + error_id + message

    Colaboradores:
      - capa llamadora (handlers)
    ----------------------------------------------------------------------------
    """

    error_code: str = "PIPELINE_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error_code=self.error_code, message=self.message, error_id=self.error_id
        )


class BackendErrorKind(str, Enum):
    """Clasificación de fallas del backend de generación de texto."""

    RATE_LIMITED = "rate_limited"
    MALFORMED = "malformed"
    TIMEOUT = "timeout"
    OTHER = "other"


class BackendError(PipelineError):
    """Errores del backend de generación (quota / rate limit / respuesta inválida)."""

    error_code: str = "BACKEND_ERROR"

    def __init__(
        self,
        message: str,
        *,
        kind: BackendErrorKind = BackendErrorKind.OTHER,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, error_id=error_id, original_error=original_error)
        self.kind = kind

    @property
    def is_rate_limited(self) -> bool:
        return self.kind is BackendErrorKind.RATE_LIMITED


class EmptyDocumentError(PipelineError):
    """El texto de entrada está vacío: no hay nada que procesar."""

    error_code: str = "EMPTY_DOCUMENT"


class ConfigurationError(PipelineError):
    """Configuración inválida o credenciales faltantes para un adapter."""

    error_code: str = "CONFIGURATION_ERROR"
