"""
===============================================================================
CRC CARD — application/segment_processor.py
===============================================================================

Class:
    SegmentProcessor

Responsibilities:
    - Construir la instrucción "PART i of N" según la tarea.
    - Emitir exactamente UNA llamada al backend por segmento (con timeout).
    - Devolver SegmentSuccess (texto verbatim) o SegmentFailure (marcador).
    - Absorber cualquier falla del backend: un segmento malo no hunde el
      resumen de un documento largo.

Collaborators:
    - domain.services.TextGenerationBackend
    - domain.services.PipelineObserver
    - application.instructions (plantillas)

Constraints:
    - Sin retry acá (eso es del adapter del backend).
    - Nunca levanta excepciones hacia el pipeline.
===============================================================================
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from ..crosscutting.exceptions import BackendError, BackendErrorKind
from ..crosscutting.observer import (
    EVENT_SEGMENT_FAILED,
    EVENT_SEGMENT_PROCESSED,
    StructuredPipelineObserver,
)
from ..domain.entities import Segment, SegmentFailure, SegmentOutcome, SegmentSuccess
from ..domain.services import PipelineObserver, TextGenerationBackend
from .instructions import failure_marker, segment_instruction, user_message
from .request import PreparedRequest


def _error_kind(exc: Exception) -> str:
    """R: Clasificación estable para logs/métricas."""
    if isinstance(exc, BackendError):
        return exc.kind.value
    if isinstance(exc, TimeoutError):
        return BackendErrorKind.TIMEOUT.value
    return BackendErrorKind.OTHER.value


class SegmentProcessor:
    """Procesa un segmento contra el backend con tolerancia a fallas."""

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

    def process(self, segment: Segment, request: PreparedRequest) -> SegmentOutcome:
        instruction = segment_instruction(
            segment,
            task=request.task,
            question=request.question,
            is_transcript=request.is_transcript,
        )
        message = user_message(
            segment.text,
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
                    "Empty segment output from backend",
                    kind=BackendErrorKind.MALFORMED,
                )
        except Exception as exc:
            # R: Cualquier falla (rate limit incluido) se registra y se sigue.
            kind = _error_kind(exc)
            self._observer.emit(
                EVENT_SEGMENT_FAILED,
                level=logging.WARNING,
                position=segment.position,
                total=segment.total,
                error_type=type(exc).__name__,
                error_kind=kind,
                error=str(exc),
                elapsed_seconds=round(time.perf_counter() - started, 4),
            )
            return SegmentFailure(
                index=segment.index,
                text=failure_marker(segment.position),
                error_type=type(exc).__name__,
                error_kind=kind,
            )

        self._observer.emit(
            EVENT_SEGMENT_PROCESSED,
            position=segment.position,
            total=segment.total,
            segment_chars=len(segment.text),
            output_chars=len(text),
            elapsed_seconds=round(time.perf_counter() - started, 4),
        )
        return SegmentSuccess(index=segment.index, text=text)
