"""
===============================================================================
USE CASE: Long Document Pipeline (Split → Process segments → Recombine)
===============================================================================

Business Goal:
    Pasar un documento/transcripción más largo que el contexto del modelo:
      1) Partirlo en segmentos por fronteras semánticas
      2) Procesar cada segmento (resumen o respuesta) en orden
      3) Recombinar los parciales en una única respuesta
      4) Observabilidad: timings + eventos + métricas

Why (Context / Intención):
    - Un solo segmento que falle no debe hundir el pedido completo.
    - Llamadas acotadas: N por segmentos + 1 de síntesis, siempre.
    - Secuencial a propósito: respeta los rate limits del backend.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    LongDocumentPipeline

Responsibilities:
    - Validar precondiciones (task, question) y rechazar input vacío.
    - Resolver tipo de documento e instrucción de sistema.
    - Orquestar Splitting → ProcessingSegments → Recombining → Done.
    - Devolver LongDocumentResult (o solo el texto vía `run`).

Collaborators:
    - BoundaryAwareSplitter
    - SegmentProcessor
    - Recombiner
    - SystemPromptProvider
    - PipelineObserver
    - StageTimings

-------------------------------------------------------------------------------
Error Mapping:
    - ValueError: task inválida / question faltante (error de programación)
    - EmptyDocumentError: texto vacío o solo espacios (nada que procesar)
    - Fallas del backend: nunca salen de acá (marcadores / fallback)
===============================================================================
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Final, Optional, Union
from uuid import uuid4

from ..context import bind_pipeline_context
from ..crosscutting.exceptions import EmptyDocumentError
from ..crosscutting.observer import (
    EVENT_PIPELINE_COMPLETED,
    EVENT_PIPELINE_STAGE,
    EVENT_PIPELINE_STARTED,
    EVENT_SPLIT_COMPLETED,
    StructuredPipelineObserver,
)
from ..crosscutting.timing import StageTimings
from ..domain.entities import DocumentInput, LongDocumentResult, SegmentOutcome, Task
from ..domain.services import (
    PipelineObserver,
    SystemPromptProvider,
    TextGenerationBackend,
)
from .document_kind import resolve_is_transcript
from .recombiner import Recombiner
from .request import LongDocumentRequest, PreparedRequest
from .segment_processor import SegmentProcessor
from .splitter import DEFAULT_MAX_SEGMENT_SIZE, BoundaryAwareSplitter

_STAGE_SPLIT: Final[str] = "split"
_STAGE_SEGMENTS: Final[str] = "segments"
_STAGE_RECOMBINE: Final[str] = "recombine"

_MSG_EMPTY_DOCUMENT: Final[str] = "Document has no text to process"
_MSG_QUESTION_REQUIRED: Final[str] = "question is required for answer-question"


class PipelineStage(str, Enum):
    """Estados del pipeline (sin transiciones hacia atrás)."""

    SPLITTING = "splitting"
    PROCESSING_SEGMENTS = "processing_segments"
    RECOMBINING = "recombining"
    DONE = "done"


def _coerce_task(task: Union[Task, str]) -> Task:
    if isinstance(task, Task):
        return task
    try:
        return Task(task)
    except ValueError:
        raise ValueError(f"Unknown task: {task!r}") from None


class LongDocumentPipeline:
    """
    Use Case (Application Service / Orchestration):
        Split + fan-out secuencial + recombinación.

    No guarda estado mutable entre requests: es seguro compartir una instancia
    entre callers concurrentes.
    """

    def __init__(
        self,
        backend: TextGenerationBackend,
        *,
        system_prompts: SystemPromptProvider,
        max_segment_size: int = DEFAULT_MAX_SEGMENT_SIZE,
        timeout_seconds: Optional[float] = None,
        observer: Optional[PipelineObserver] = None,
        splitter: Optional[BoundaryAwareSplitter] = None,
    ) -> None:
        self._observer = observer or StructuredPipelineObserver()
        self._system_prompts = system_prompts
        self._splitter = splitter or BoundaryAwareSplitter(max_segment_size)
        self._processor = SegmentProcessor(
            backend, timeout_seconds=timeout_seconds, observer=self._observer
        )
        self._recombiner = Recombiner(
            backend, timeout_seconds=timeout_seconds, observer=self._observer
        )

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def run(
        self,
        document_text: str,
        task: Union[Task, str],
        question: Optional[str] = None,
        document_display_name: str = "",
        is_transcript: Optional[bool] = None,
    ) -> str:
        """Devuelve solo el texto final (interfaz de entrada simple)."""
        request = LongDocumentRequest(
            document=DocumentInput(
                text=document_text,
                display_name=document_display_name,
                is_transcript=is_transcript,
            ),
            task=task,
            question=question,
        )
        return self.execute(request).text

    def execute(self, request: LongDocumentRequest) -> LongDocumentResult:
        """
        Ejecuta el flujo completo:
          1) validar -> 2) split -> 3) segmentos (en orden) -> 4) recombinar

        Raises:
            ValueError: task inválida o question faltante.
            EmptyDocumentError: texto vacío / solo espacios.
        """
        prepared = self._prepare(request)
        document = request.document

        with bind_pipeline_context(
            request_id=request.request_id or str(uuid4()),
            document_name=document.display_name,
        ):
            timings = StageTimings()
            self._observer.emit(
                EVENT_PIPELINE_STARTED,
                task=prepared.task.value,
                is_transcript=prepared.is_transcript,
                text_chars=len(document.text),
            )

            # 1) Splitting
            self._enter(PipelineStage.SPLITTING)
            with timings.measure(_STAGE_SPLIT):
                segments = self._splitter.split(document.text)
            self._observer.emit(
                EVENT_SPLIT_COMPLETED,
                segments_total=len(segments),
                max_segment_size=self._splitter.max_segment_size,
                segment_chars=[len(s.text) for s in segments],
            )

            # 2) Segmentos: uno por vez, en orden de índice
            self._enter(PipelineStage.PROCESSING_SEGMENTS)
            outcomes: list[SegmentOutcome] = []
            with timings.measure(_STAGE_SEGMENTS):
                for segment in segments:
                    outcomes.append(self._processor.process(segment, prepared))

            # 3) Recombinación (una sola llamada)
            self._enter(PipelineStage.RECOMBINING)
            with timings.measure(_STAGE_RECOMBINE):
                recombined = self._recombiner.recombine(outcomes, prepared)

            self._enter(PipelineStage.DONE)
            failed = tuple(o.index + 1 for o in outcomes if not o.ok)
            result = LongDocumentResult(
                text=recombined.text,
                task=prepared.task,
                segments_total=len(segments),
                failed_segments=failed,
                used_fallback=recombined.used_fallback,
                backend_calls=len(segments) + 1,
                outcomes=tuple(outcomes),
                timings=timings.to_dict(),
            )

            degraded = bool(failed) or recombined.used_fallback
            self._observer.emit(
                EVENT_PIPELINE_COMPLETED,
                level=logging.WARNING if degraded else logging.INFO,
                segments_total=result.segments_total,
                failed_segments=list(failed),
                used_fallback=result.used_fallback,
                backend_calls=result.backend_calls,
                answer_chars=len(result.text),
                **result.timings,
            )
            return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _prepare(self, request: LongDocumentRequest) -> PreparedRequest:
        task = _coerce_task(request.task)

        question = request.question
        if task is Task.ANSWER_QUESTION:
            if question is None or not question.strip():
                raise ValueError(_MSG_QUESTION_REQUIRED)
            question = question.strip()

        document = request.document
        if not (document.text or "").strip():
            raise EmptyDocumentError(_MSG_EMPTY_DOCUMENT)

        is_transcript = resolve_is_transcript(
            document.display_name, document.is_transcript
        )
        return PreparedRequest(
            task=task,
            question=question,
            display_name=document.display_name,
            is_transcript=is_transcript,
            system_instruction=self._system_prompts.system_instruction(
                is_transcript=is_transcript, task=task
            ),
        )

    def _enter(self, stage: PipelineStage) -> None:
        self._observer.emit(
            EVENT_PIPELINE_STAGE, level=logging.DEBUG, stage=stage.value
        )
