"""longdoc.infrastructure.services.retry

Name: Retry Helper with Exponential Backoff + Jitter

Qué es
------
Resiliencia para las llamadas de los adapters de generación de texto:
  - Clasificación de errores: **transient** (reintentar) vs **permanent** (fail-fast)
  - Decorator de `tenacity` con exponential backoff + jitter
  - Logging estructurado de cada reintento

Arquitectura
------------
- Capa: Infrastructure
- Rol: lo usan los adapters (Anthropic / Google). El pipeline NO reintenta:
  una falla que sobrevive a estos reintentos se vuelve marcador de segmento.

CRC (Component Card)
--------------------
Component: retry helper
Responsibilities:
  - Decidir qué errores son reintentables
  - Proveer un decorator estándar (tenacity) con backoff+jitter
Collaborators:
  - tenacity (motor de retry)
  - crosscutting.config.get_settings (attempts/delays por defecto)
  - crosscutting.logger
Constraints:
  - Reintentar SOLO transitorios (408, 429, 5xx, 529, timeouts, conexión)
  - No reintentar 400/401/403/404
"""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from ...crosscutting.logger import logger

T = TypeVar("T")

# R: 529 = "overloaded" en la API de Anthropic.
TRANSIENT_HTTP_CODES: frozenset[int] = frozenset({408, 429, 500, 502, 503, 504, 529})

PERMANENT_HTTP_CODES: frozenset[int] = frozenset({400, 401, 403, 404, 413, 422})

_TRANSIENT_NAME_PATTERNS: tuple[str, ...] = (
    "timeout",
    "connect",
    "unavailable",
    "resourceexhausted",
    "deadline",
)

_TRANSIENT_MESSAGE_PATTERNS: tuple[str, ...] = (
    "rate limit",
    "too many requests",
    "overloaded",
    "temporarily unavailable",
    "connection reset",
    "timed out",
)


def get_http_status_code(exception: BaseException) -> int | None:
    """R: Status HTTP de la excepción (google-genai `code`, httpx `response.status_code`)."""
    code = getattr(exception, "code", None)
    if isinstance(code, int) and code >= 100:
        return code

    resp = getattr(exception, "response", None)
    status_code = getattr(resp, "status_code", None)
    if isinstance(status_code, int):
        return status_code

    status_code = getattr(exception, "status_code", None)
    if isinstance(status_code, int):
        return status_code

    return None


def is_transient_error(exception: BaseException) -> bool:
    """R: True si vale la pena reintentar.

    Orden:
      1) status HTTP (permanente → False, transitorio → True)
      2) TimeoutError / ConnectionError
      3) heurística por nombre de clase y por mensaje
      4) default: no reintentar
    """
    status_code = get_http_status_code(exception)
    if status_code is not None:
        if status_code in PERMANENT_HTTP_CODES:
            return False
        if status_code in TRANSIENT_HTTP_CODES:
            return True

    if isinstance(exception, (TimeoutError, ConnectionError)):
        return True

    name = type(exception).__name__.lower()
    if any(p in name for p in _TRANSIENT_NAME_PATTERNS):
        return True

    message = str(exception).lower()
    return any(p in message for p in _TRANSIENT_MESSAGE_PATTERNS)


def _log_retry(retry_state: RetryCallState) -> None:
    """R: before_sleep: loguea intento, espera y error previo."""
    fn = getattr(retry_state, "fn", None)
    exc: Optional[BaseException] = None
    if retry_state.outcome is not None:
        exc = retry_state.outcome.exception()

    wait_time = retry_state.next_action.sleep if retry_state.next_action else 0

    logger.warning(
        "Retrying backend call",
        extra={
            "function": getattr(fn, "__name__", "unknown"),
            "attempt": retry_state.attempt_number,
            "wait_seconds": round(float(wait_time), 2),
            "error": str(exc) if exc else None,
            "error_type": type(exc).__name__ if exc else None,
        },
    )


def create_retry_decorator(
    max_attempts: int | None = None,
    base_delay: float | None = None,
    max_delay: float | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """R: Decorator `tenacity` con exponential backoff + jitter.

    Los valores no provistos se toman de Settings.
    """
    if max_attempts is None or base_delay is None or max_delay is None:
        from ...crosscutting.config import get_settings

        settings = get_settings()
        if max_attempts is None:
            max_attempts = settings.retry_max_attempts
        if base_delay is None:
            base_delay = settings.retry_base_delay_seconds
        if max_delay is None:
            max_delay = settings.retry_max_delay_seconds

    if max_attempts <= 0:
        raise ValueError("max_attempts must be > 0")
    if base_delay < 0:
        raise ValueError("base_delay must be >= 0")
    if max_delay <= 0:
        raise ValueError("max_delay must be > 0")

    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential_jitter(
            initial=base_delay, max=max_delay, jitter=base_delay
        ),
        retry=retry_if_exception(is_transient_error),
        before_sleep=_log_retry,
        reraise=True,
    )
