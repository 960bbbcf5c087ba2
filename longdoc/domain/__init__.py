"""
Domain Layer (entidades + puertos)

Barrel del dominio: re-exporta entidades y protocolos para que application e
infrastructure importen desde un único lugar.
"""

from .entities import (
    DocumentInput,
    LongDocumentResult,
    RecombinationOutcome,
    Segment,
    SegmentFailure,
    SegmentOutcome,
    SegmentSuccess,
    Task,
)
from .services import PipelineObserver, SystemPromptProvider, TextGenerationBackend

__all__ = [
    "DocumentInput",
    "LongDocumentResult",
    "PipelineObserver",
    "RecombinationOutcome",
    "Segment",
    "SegmentFailure",
    "SegmentOutcome",
    "SegmentSuccess",
    "SystemPromptProvider",
    "Task",
    "TextGenerationBackend",
]
