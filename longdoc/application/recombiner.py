"""
===============================================================================
CRC CARD — application/recombiner.py
===============================================================================

Class:
    Recombiner

Responsibilities:
    - Unir N resultados parciales (en orden) en una única respuesta.
    - Usar UNA sola llamada de síntesis al backend, sin importar N.
    - Fallback determinístico si la síntesis falla o vuelve vacía.

Collaborators:
    - domain.services.TextGenerationBackend
    - domain.services.PipelineObserver
    - application.instructions (síntesis + fallback)

Constraints:
    - Los marcadores de error entran a la síntesis como texto literal.
    - Nunca levanta excepciones: siempre devuelve texto no vacío.
===============================================================================
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

from ..crosscutting.exceptions import BackendError, BackendErrorKind
from ..crosscutting.observer import (
    EVENT_RECOMBINATION_COMPLETED,
    EVENT_RECOMBINATION_FAILED,
    StructuredPipelineObserver,
)
from ..domain.entities import RecombinationOutcome, SegmentOutcome
from ..domain.services import PipelineObserver, TextGenerationBackend
from .instructions import fallback_text, synthesis_instruction, user_message
from .request import PreparedRequest


class Recombiner:
    """Síntesis de parciales con fallback de última línea."""

    def __init__(
        self,
        backend: TextGenerationBackend,
        *,
        timeout_seconds: Optional[float] = None,
        observer: Optional[PipelineObserver] = None,
    ) -> None:
        self._backend = backend
        self._timeout_seconds = timeout_seconds
        self._observer = observer or StructuredPipelineObserver()

    def recombine(
        self, outcomes: Sequence[SegmentOutcome], request: PreparedRequest
    ) -> RecombinationOutcome:
        instruction = synthesis_instruction(
            outcomes,
            task=request.task,
            question=request.question,
            is_transcript=request.is_transcript,
        )
        # R: Sin contenido primario: la instrucción ya lleva todo el material.
        message = user_message(
            "",
            instruction,
            display_name=request.display_name,
            is_transcript=request.is_transcript,
        )

        started = time.perf_counter()
        try:
            text = self._backend.generate(
                request.system_instruction,
                message,
                timeout_seconds=self._timeout_seconds,
            )
            if not isinstance(text, str) or not text.strip():
                raise BackendError(
                    "Empty synthesis from backend", kind=BackendErrorKind.MALFORMED
                )
        except Exception as exc:
            self._observer.emit(
                EVENT_RECOMBINATION_FAILED,
                level=logging.WARNING,
                segments_total=len(outcomes),
                error_type=type(exc).__name__,
                error_kind=exc.kind.value
                if isinstance(exc, BackendError)
                else BackendErrorKind.OTHER.value,
                error=str(exc),
                elapsed_seconds=round(time.perf_counter() - started, 4),
            )
            return RecombinationOutcome(
                text=fallback_text(outcomes, task=request.task), used_fallback=True
            )

        self._observer.emit(
            EVENT_RECOMBINATION_COMPLETED,
            segments_total=len(outcomes),
            output_chars=len(text),
            elapsed_seconds=round(time.perf_counter() - started, 4),
        )
        return RecombinationOutcome(text=text, used_fallback=False)
