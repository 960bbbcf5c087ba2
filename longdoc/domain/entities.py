"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del pipeline de documentos largos

Responsabilidades:
    - Representar la tarea pedida (Task) y el documento de entrada.
    - Representar segmentos (Segment) y sus resultados (SegmentOutcome).
    - Representar el resultado final (LongDocumentResult).

Colaboradores:
    - application/*: construyen y consumen estas entidades.

Reglas:
    - Todo es request-scoped e inmutable (frozen dataclasses).
    - Nada se persiste.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class Task(str, Enum):
    """Tarea pedida por el caller (explícita, nunca inferida del mensaje)."""

    SUMMARIZE = "summarize"
    ANSWER_QUESTION = "answer-question"


@dataclass(frozen=True)
class DocumentInput:
    """
    Documento a procesar (propiedad del caller; el pipeline no lo muta).

    Attributes:
        text: texto plano ya extraído (PDF/audio los resuelve otro componente)
        display_name: nombre visible del documento
        is_transcript: True si es transcripción de audio; None = inferir por nombre
    """

    text: str
    display_name: str = ""
    is_transcript: Optional[bool] = None


@dataclass(frozen=True)
class Segment:
    """
    Substring contiguo del documento fuente.

    Notas:
      - start/end son offsets en caracteres sobre el texto original.
      - index es 0-based; position (1-based) es lo que ve el modelo ("PART i of N").
    """

    index: int
    text: str
    start: int
    end: int
    total: int

    @property
    def position(self) -> int:
        return self.index + 1

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index == self.total - 1


@dataclass(frozen=True)
class SegmentSuccess:
    """Salida del backend para un segmento (texto verbatim)."""

    index: int
    text: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class SegmentFailure:
    """
    Falla al procesar un segmento.

    `text` es el marcador que participa literalmente en la recombinación,
    p.ej. "[Error processing part 3]".
    """

    index: int
    text: str
    error_type: str = ""
    error_kind: str = ""

    @property
    def ok(self) -> bool:
        return False


SegmentOutcome = Union[SegmentSuccess, SegmentFailure]


@dataclass(frozen=True)
class RecombinationOutcome:
    """Texto final de la recombinación y si salió del fallback determinístico."""

    text: str
    used_fallback: bool


@dataclass(frozen=True)
class LongDocumentResult:
    """
    Resultado de una ejecución completa del pipeline.

    Attributes:
        text: respuesta final (nunca vacía)
        task: tarea ejecutada
        segments_total: N
        failed_segments: posiciones 1-based de los segmentos que fallaron
        used_fallback: True si la recombinación usó el fallback
        backend_calls: llamadas emitidas al backend (N + 1)
        outcomes: resultados por segmento, en orden
        timings: {stage}_ms + total_ms
    """

    text: str
    task: Task
    segments_total: int
    failed_segments: tuple[int, ...] = ()
    used_fallback: bool = False
    backend_calls: int = 0
    outcomes: tuple[SegmentOutcome, ...] = ()
    timings: dict[str, float] = field(default_factory=dict)

    @property
    def partial(self) -> bool:
        """True si al menos un segmento falló."""
        return bool(self.failed_segments)
