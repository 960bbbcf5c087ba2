"""
===============================================================================
TARJETA CRC — application/instructions.py
===============================================================================

Módulo:
    Construcción de instrucciones por segmento y de síntesis

Responsabilidades:
    - Armar la instrucción "PART i of N" según la tarea.
    - Armar el mensaje de usuario (contenido del segmento + instrucción).
    - Armar la instrucción de síntesis que lista los resultados parciales.
    - Armar el texto de fallback cuando la síntesis falla.

Colaboradores:
    - application/segment_processor.py
    - application/recombiner.py

Reglas:
    - Funciones puras (sin IO), fáciles de testear.
    - Las plantillas viven acá como constantes (sin strings mágicos dispersos).
===============================================================================
"""

from __future__ import annotations

from typing import Final, Optional, Sequence

from ..domain.entities import Segment, SegmentOutcome, Task

_LABEL_TRANSCRIPT: Final[str] = "transcription"
_LABEL_DOCUMENT: Final[str] = "document"

_CONTENT_HEADER_TRANSCRIPT: Final[str] = "Here is the audio transcription"
_CONTENT_HEADER_DOCUMENT: Final[str] = "Here is the document content"

_PART_SUMMARIZE: Final[str] = (
    "Please summarize this PART {position} of {total} of the {label}. "
    "Focus on key points only:"
)
_PART_ANSWER: Final[str] = (
    "This is PART {position} of {total} of the {label}. Based on this part only, "
    "please answer the following question: {question}"
)

_SYNTHESIS_SUMMARIZE: Final[str] = (
    "You received the following {total} summaries of different parts of a {label}.\n"
    "Please combine them into one coherent, well-organized summary. "
    "Remove redundancy but preserve all key information:\n\n"
)
_SYNTHESIS_ANSWER: Final[str] = (
    'You received the following {total} answers to the question "{question}" '
    "from different parts of a {label}.\n"
    "Please combine them into one coherent, non-redundant answer "
    "that addresses the question fully:\n\n"
)

_BLOCK_SUMMARY: Final[str] = "PART {position} SUMMARY:\n{text}"
_BLOCK_ANSWER: Final[str] = "ANSWER FROM PART {position}:\n{text}"

_FALLBACK_PREFIX_SUMMARY: Final[str] = (
    "COMBINED SUMMARY (automatically assembled, not unified due to error):\n\n"
)
_FALLBACK_PREFIX_ANSWER: Final[str] = (
    "COMBINED ANSWER (automatically assembled, not unified due to error):\n\n"
)
FALLBACK_SEPARATOR: Final[str] = "\n\n---\n\n"

_FAILURE_MARKER: Final[str] = "[Error processing part {position}]"


def source_label(is_transcript: bool) -> str:
    return _LABEL_TRANSCRIPT if is_transcript else _LABEL_DOCUMENT


def failure_marker(position: int) -> str:
    """Marcador literal para un segmento fallido (posición 1-based)."""
    return _FAILURE_MARKER.format(position=position)


def segment_instruction(
    segment: Segment,
    *,
    task: Task,
    question: Optional[str],
    is_transcript: bool,
) -> str:
    """Instrucción "PART i of N" para un segmento."""
    label = source_label(is_transcript)
    if task is Task.SUMMARIZE:
        return _PART_SUMMARIZE.format(
            position=segment.position, total=segment.total, label=label
        )
    return _PART_ANSWER.format(
        position=segment.position,
        total=segment.total,
        label=label,
        question=question or "",
    )


def user_message(
    content: str, instruction: str, *, display_name: str, is_transcript: bool
) -> str:
    """
    Mensaje de usuario: contenido + instrucción.

    Sin contenido (síntesis) el mensaje es solo la instrucción.
    """
    if not content:
        return instruction

    header = _CONTENT_HEADER_TRANSCRIPT if is_transcript else _CONTENT_HEADER_DOCUMENT
    if display_name:
        header = f'{header} from "{display_name}"'
    return f"{header}:\n\n{content}\n\n{instruction}"


def synthesis_instruction(
    outcomes: Sequence[SegmentOutcome],
    *,
    task: Task,
    question: Optional[str],
    is_transcript: bool,
) -> str:
    """
    Instrucción de síntesis con todos los parciales etiquetados.

    Los marcadores de error participan como texto literal: el modelo puede
    reconocer los huecos.
    """
    label = source_label(is_transcript)
    total = len(outcomes)

    if task is Task.SUMMARIZE:
        head = _SYNTHESIS_SUMMARIZE.format(total=total, label=label)
        block = _BLOCK_SUMMARY
    else:
        head = _SYNTHESIS_ANSWER.format(
            total=total, label=label, question=question or ""
        )
        block = _BLOCK_ANSWER

    blocks = [
        block.format(position=outcome.index + 1, text=outcome.text)
        for outcome in outcomes
    ]
    return head + "\n\n".join(blocks)


def fallback_text(outcomes: Sequence[SegmentOutcome], *, task: Task) -> str:
    """
    Concatenación determinística de los parciales (último recurso).

    Nunca vacía: el prefijo siempre está presente.
    """
    prefix = (
        _FALLBACK_PREFIX_SUMMARY if task is Task.SUMMARIZE else _FALLBACK_PREFIX_ANSWER
    )
    return prefix + FALLBACK_SEPARATOR.join(outcome.text for outcome in outcomes)
