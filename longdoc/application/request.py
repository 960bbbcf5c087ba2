"""
Name: Pipeline request DTOs

Responsibilities:
  - LongDocumentRequest: caller input for one pipeline run
  - PreparedRequest: validated, resolved view shared by processor and recombiner
    (task, question, document kind, system instruction)

Notes:
  - Both are immutable and request-scoped; nothing here outlives a run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..domain.entities import DocumentInput, Task


@dataclass(frozen=True)
class LongDocumentRequest:
    """
    DTO de entrada del pipeline.

    Attributes:
        document: texto + nombre + tipo (transcripción / documento)
        task: summarize | answer-question (Task o su valor string)
        question: obligatoria para answer-question
        request_id: correlación opcional para logs
    """

    document: DocumentInput
    task: Union[Task, str]
    question: Optional[str] = None
    request_id: str = ""


@dataclass(frozen=True)
class PreparedRequest:
    """Vista validada del request (lo que ven las etapas)."""

    task: Task
    question: Optional[str]
    display_name: str
    is_transcript: bool
    system_instruction: str
