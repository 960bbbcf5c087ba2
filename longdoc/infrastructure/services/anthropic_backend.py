"""
Name: Anthropic Claude Text Backend (Adapter over the Messages HTTP API)

Qué hace
--------
Implementación concreta de `domain.services.TextGenerationBackend` contra la
API de Messages de Anthropic, usando `httpx`:
  - Arma el request (model, max_tokens, temperature, system, messages)
  - Reintenta errores transitorios (429 / 5xx / 529 / timeouts) con tenacity
  - Traduce fallas a `BackendError` con `kind` (RATE_LIMITED / MALFORMED / TIMEOUT / OTHER)
  - Normaliza markdown → HTML si `render_html` está activo

Arquitectura
------------
- Capa: Infrastructure
- Rol: Adapter hacia un proveedor externo

CRC (Class-Responsibility-Collaboration)
----------------------------------------
Class: AnthropicTextBackend
Responsibilities:
  - Enviar una llamada por `generate` (más reintentos transitorios)
  - Extraer `content[0].text` o fallar como MALFORMED
  - Respetar el timeout por llamada que le pasa el pipeline
Collaborators:
  - httpx.Client (inyectable para tests con MockTransport)
  - retry.create_retry_decorator
  - html_format.markdown_to_html
Constraints:
  - Nunca loguear la API key (el logger la redacta igual)
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from ...crosscutting.exceptions import BackendError, BackendErrorKind, ConfigurationError
from ...crosscutting.logger import logger
from .html_format import markdown_to_html
from .retry import create_retry_decorator

_RATE_LIMIT_ERROR_TYPE = "rate_limit_error"


class AnthropicTextBackend:
    """R: Claude implementation of TextGenerationBackend."""

    DEFAULT_MODEL_ID = "claude-3-haiku-20240307"
    DEFAULT_API_URL = "https://api.anthropic.com/v1/messages"
    DEFAULT_API_VERSION = "2023-06-01"

    def __init__(
        self,
        api_key: str,
        *,
        model_id: str | None = None,
        api_url: str | None = None,
        api_version: str | None = None,
        max_tokens: int = 1500,
        temperature: float = 0.2,
        default_timeout_seconds: float = 60.0,
        render_html: bool = True,
        client: httpx.Client | None = None,
        retry_decorator=None,
    ) -> None:
        """
        Raises:
            ConfigurationError: si no hay API key.
        """
        resolved_key = (api_key or "").strip()
        if not resolved_key:
            logger.error("AnthropicTextBackend: ANTHROPIC_API_KEY not configured")
            raise ConfigurationError("ANTHROPIC_API_KEY not configured")

        self._api_key = resolved_key
        self._model_id = (model_id or self.DEFAULT_MODEL_ID).strip()
        self._api_url = api_url or self.DEFAULT_API_URL
        self._api_version = api_version or self.DEFAULT_API_VERSION
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._default_timeout = default_timeout_seconds
        self._render_html = render_html
        self._client = client or httpx.Client()

        decorator = retry_decorator or create_retry_decorator()
        self._send = decorator(self._post)

        logger.info(
            "AnthropicTextBackend initialized",
            extra={"model_id": self._model_id, "render_html": self._render_html},
        )

    @property
    def model_id(self) -> str:
        return self._model_id

    def _post(self, payload: dict[str, Any], timeout: float) -> httpx.Response:
        """R: Una llamada HTTP; levanta HTTPStatusError en no-2xx (retry decide)."""
        response = self._client.post(
            self._api_url,
            json=payload,
            headers={
                "content-type": "application/json",
                "x-api-key": self._api_key,
                "anthropic-version": self._api_version,
            },
            timeout=timeout,
        )
        response.raise_for_status()
        return response

    def generate(
        self,
        system_instruction: str,
        user_message: str,
        *,
        timeout_seconds: Optional[float] = None,
    ) -> str:
        payload = {
            "model": self._model_id,
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
            "system": system_instruction,
            "messages": [{"role": "user", "content": user_message}],
        }
        timeout = timeout_seconds or self._default_timeout

        try:
            response = self._send(payload, timeout)
        except httpx.HTTPStatusError as exc:
            raise self._status_error(exc) from exc
        except httpx.TimeoutException as exc:
            logger.error(
                "AnthropicTextBackend: request timed out",
                extra={"model_id": self._model_id, "timeout_seconds": timeout},
            )
            raise BackendError(
                "Claude request timed out",
                kind=BackendErrorKind.TIMEOUT,
                original_error=exc,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(
                "AnthropicTextBackend: transport error",
                exc_info=True,
                extra={"model_id": self._model_id, "error_type": type(exc).__name__},
            )
            raise BackendError(
                "Error calling Claude API", original_error=exc
            ) from exc

        text = self._extract_text(response)
        logger.info(
            "AnthropicTextBackend: Response generated",
            extra={"model_id": self._model_id, "answer_chars": len(text)},
        )
        return markdown_to_html(text) if self._render_html else text

    def _status_error(self, exc: httpx.HTTPStatusError) -> BackendError:
        """R: Traduce un no-2xx (ya agotados los reintentos) a BackendError."""
        status = exc.response.status_code
        error_type = ""
        message = "Error calling Claude API"
        try:
            body = exc.response.json()
            error = body.get("error") or {}
            error_type = error.get("type", "")
            message = error.get("message") or message
        except (ValueError, AttributeError):
            pass

        kind = BackendErrorKind.OTHER
        if status == 429 or error_type == _RATE_LIMIT_ERROR_TYPE:
            kind = BackendErrorKind.RATE_LIMITED

        logger.error(
            "AnthropicTextBackend: API error",
            extra={
                "model_id": self._model_id,
                "status_code": status,
                "api_error_type": error_type,
                "error_kind": kind.value,
            },
        )
        return BackendError(message, kind=kind, original_error=exc)

    def _extract_text(self, response: httpx.Response) -> str:
        try:
            data = response.json()
            text = data["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error(
                "AnthropicTextBackend: malformed response",
                extra={"model_id": self._model_id, "error_type": type(exc).__name__},
            )
            raise BackendError(
                "No response from Claude",
                kind=BackendErrorKind.MALFORMED,
                original_error=exc,
            ) from exc

        if not isinstance(text, str) or not text.strip():
            raise BackendError("No response from Claude", kind=BackendErrorKind.MALFORMED)
        return text
