"""
Application Layer (casos de uso del pipeline)

Barrel: expone el pipeline y sus etapas para el composition root y los tests.
"""

from .document_kind import looks_like_transcript, resolve_is_transcript
from .long_document_pipeline import LongDocumentPipeline, PipelineStage
from .recombiner import Recombiner
from .request import LongDocumentRequest, PreparedRequest
from .segment_processor import SegmentProcessor
from .splitter import DEFAULT_MAX_SEGMENT_SIZE, BoundaryAwareSplitter, split_text

__all__ = [
    "DEFAULT_MAX_SEGMENT_SIZE",
    "BoundaryAwareSplitter",
    "LongDocumentPipeline",
    "LongDocumentRequest",
    "PipelineStage",
    "PreparedRequest",
    "Recombiner",
    "SegmentProcessor",
    "looks_like_transcript",
    "resolve_is_transcript",
    "split_text",
]
