"""
Name: Google Gemini Text Backend (Adapter)

Qué hace
--------
Implementación concreta de `domain.services.TextGenerationBackend` usando
Google GenAI (Gemini). Alternativa a Claude con el mismo contrato:
  - system_instruction + un único mensaje de usuario por llamada
  - Reintentos de errores transitorios (tenacity) vía `retry.py`
  - Traducción de errores a `BackendError` con `kind`

Arquitectura
------------
- Capa: Infrastructure
- Rol: Adapter hacia un proveedor externo (Google GenAI)

CRC (Class-Responsibility-Collaboration)
----------------------------------------
Class: GoogleTextBackend
Responsibilities:
  - Generar una respuesta por llamada con límites de tokens/temperatura
  - Propagar el timeout por llamada (HttpOptions en milisegundos)
  - Respuesta vacía → BackendError MALFORMED
Collaborators:
  - google.genai.Client: SDK externo (inyectable para tests)
  - retry.create_retry_decorator
  - html_format.markdown_to_html
"""

from __future__ import annotations

from typing import Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ...crosscutting.exceptions import BackendError, BackendErrorKind, ConfigurationError
from ...crosscutting.logger import logger
from .html_format import markdown_to_html
from .retry import create_retry_decorator, get_http_status_code


class GoogleTextBackend:
    """
    R: Gemini implementation of TextGenerationBackend.

    Por defecto usa gemini-1.5-flash.
    """

    DEFAULT_MODEL_ID = "gemini-1.5-flash"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: genai.Client | None = None,
        model_id: str | None = None,
        max_tokens: int = 1500,
        temperature: float = 0.2,
        default_timeout_seconds: float = 60.0,
        render_html: bool = True,
        retry_decorator=None,
    ) -> None:
        """
        R: Inicializa el backend (preferible vía DI).

        Args:
            api_key: API key (inyectada desde Settings)
            client: Cliente genai preconstruido (útil para tests)
            model_id: Override del modelo
            retry_decorator: Decorator tenacity (inyectable para tests)

        Raises:
            ConfigurationError: si no hay API key y no se inyectó `client`.
        """
        resolved_key = (api_key or "").strip()
        if not resolved_key and client is None:
            logger.error("GoogleTextBackend: GOOGLE_API_KEY not configured")
            raise ConfigurationError("GOOGLE_API_KEY not configured")

        self._client = client or genai.Client(api_key=resolved_key)
        self._model_id = (model_id or self.DEFAULT_MODEL_ID).strip()
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._default_timeout = default_timeout_seconds
        self._render_html = render_html

        decorator = retry_decorator or create_retry_decorator()
        self._generate_content = decorator(self._client.models.generate_content)

        logger.info(
            "GoogleTextBackend initialized",
            extra={"model_id": self._model_id, "render_html": self._render_html},
        )

    @property
    def model_id(self) -> str:
        """R: Identificador del modelo (para logs/debug)."""
        return self._model_id

    def _config(
        self, system_instruction: str, timeout_seconds: float
    ) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=system_instruction,
            max_output_tokens=self._max_tokens,
            temperature=self._temperature,
            http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
        )

    def generate(
        self,
        system_instruction: str,
        user_message: str,
        *,
        timeout_seconds: Optional[float] = None,
    ) -> str:
        timeout = timeout_seconds or self._default_timeout

        try:
            response = self._generate_content(
                model=self._model_id,
                contents=user_message,
                config=self._config(system_instruction, timeout),
            )
        except genai_errors.APIError as exc:
            kind = (
                BackendErrorKind.RATE_LIMITED
                if get_http_status_code(exc) == 429
                else BackendErrorKind.OTHER
            )
            logger.error(
                "GoogleTextBackend: API error",
                extra={
                    "model_id": self._model_id,
                    "status_code": get_http_status_code(exc),
                    "error_kind": kind.value,
                },
            )
            raise BackendError(
                "Error calling Gemini API", kind=kind, original_error=exc
            ) from exc
        except TimeoutError as exc:
            raise BackendError(
                "Gemini request timed out",
                kind=BackendErrorKind.TIMEOUT,
                original_error=exc,
            ) from exc
        except Exception as exc:
            logger.error(
                "GoogleTextBackend: Generation failed",
                exc_info=True,
                extra={"model_id": self._model_id, "error_type": type(exc).__name__},
            )
            kind = (
                BackendErrorKind.TIMEOUT
                if "timeout" in type(exc).__name__.lower()
                else BackendErrorKind.OTHER
            )
            raise BackendError(
                "Failed to generate response", kind=kind, original_error=exc
            ) from exc

        text = (getattr(response, "text", "") or "").strip()
        if not text:
            logger.error(
                "GoogleTextBackend: empty response", extra={"model_id": self._model_id}
            )
            raise BackendError("No response from Gemini", kind=BackendErrorKind.MALFORMED)

        logger.info(
            "GoogleTextBackend: Response generated",
            extra={"model_id": self._model_id, "answer_chars": len(text)},
        )
        return markdown_to_html(text) if self._render_html else text
