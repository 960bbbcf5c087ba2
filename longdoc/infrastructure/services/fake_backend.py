"""
Name: Fake Text Generation Backend (Deterministic Test Double)

Qué es
------
Implementación determinista de `domain.services.TextGenerationBackend` para
tests/CI y desarrollo local sin credenciales. No realiza IO.

Permite probar:
  - el flujo completo del pipeline (N llamadas de segmento + 1 de síntesis)
  - tolerancia a fallas parciales (fallas inyectadas por número de llamada)
  - idempotencia (mismas entradas → misma salida)

CRC (Class-Responsibility-Collaboration)
----------------------------------------
Class: FakeTextBackend
Responsibilities:
  - Generar texto determinista derivado de (system_instruction, user_message)
  - Registrar las últimas llamadas recibidas (para asserts), con tope
  - Fallar a pedido en llamadas específicas
Collaborators:
  - domain.services.TextGenerationBackend
  - crosscutting.exceptions.BackendError
Constraints:
  - Sin IO / sin dependencias externas
  - La salida nunca repite el input (no filtra etiquetas "PART")
"""

from __future__ import annotations

import hashlib
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from ...crosscutting.exceptions import BackendError, BackendErrorKind
from ...crosscutting.logger import logger


@dataclass(frozen=True)
class RecordedCall:
    """R: Una llamada recibida por el fake."""

    system_instruction: str
    user_message: str
    timeout_seconds: Optional[float]


def _build_text(system_instruction: str, user_message: str) -> str:
    """R: sha256("system|user") como firma estable para snapshot asserts."""
    digest = hashlib.sha256(
        f"{system_instruction}|{user_message}".encode("utf-8")
    ).hexdigest()[:16]
    return f"Texto simulado ({digest})"


class FakeTextBackend:
    """R: Deterministic TextGenerationBackend for tests/CI."""

    MODEL_ID = "fake-text-v1"

    def __init__(
        self,
        *,
        fail_on_calls: Iterable[int] = (),
        failure_kind: BackendErrorKind = BackendErrorKind.OTHER,
        responses: Optional[Mapping[int, str]] = None,
        max_recorded_calls: Optional[int] = 1000,
    ) -> None:
        """
        Args:
            fail_on_calls: números de llamada (1-based) que levantan BackendError
            failure_kind: kind de las fallas inyectadas
            responses: overrides de salida por número de llamada (1-based)
            max_recorded_calls: cuántas llamadas recientes se guardan en
                `calls` (None = sin tope). `call_count` cuenta todas.
        """
        self._fail_on_calls = frozenset(fail_on_calls)
        self._failure_kind = failure_kind
        self._responses = dict(responses or {})
        self.calls: deque[RecordedCall] = deque(maxlen=max_recorded_calls)
        self._call_count = 0

        logger.debug(
            "FakeTextBackend initialized",
            extra={
                "model_id": self.MODEL_ID,
                "fail_on_calls": sorted(self._fail_on_calls),
            },
        )

    @property
    def model_id(self) -> str:
        return self.MODEL_ID

    @property
    def call_count(self) -> int:
        return self._call_count

    def reset(self) -> None:
        """R: Olvida las llamadas registradas y reinicia la numeración."""
        self.calls.clear()
        self._call_count = 0

    def generate(
        self,
        system_instruction: str,
        user_message: str,
        *,
        timeout_seconds: Optional[float] = None,
    ) -> str:
        self.calls.append(
            RecordedCall(
                system_instruction=system_instruction,
                user_message=user_message,
                timeout_seconds=timeout_seconds,
            )
        )
        self._call_count += 1
        call_number = self._call_count

        if call_number in self._fail_on_calls:
            raise BackendError(
                f"Injected failure on call {call_number}", kind=self._failure_kind
            )

        if call_number in self._responses:
            return self._responses[call_number]

        return _build_text(system_instruction, user_message)
