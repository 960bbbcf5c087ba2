"""
Name: Structured Pipeline Observer

Responsibilities:
  - Receive diagnostic events from the pipeline stages (split / segment / recombine)
  - Write each event to the JSON logger with its structured fields
  - Translate the events that matter for dashboards into Prometheus metrics

Collaborators:
  - crosscutting.logger (JSON logs)
  - crosscutting.metrics (optional Prometheus counters/histograms)
  - domain.services.PipelineObserver (contract this class satisfies)

Notes:
  - Stages never call logger/metrics directly; they emit through an injected
    observer, so tests can swap it for a recording double.
"""

from __future__ import annotations

import logging
from typing import Any, Final

from . import metrics
from .logger import logger as default_logger

EVENT_PIPELINE_STARTED: Final[str] = "pipeline_started"
EVENT_PIPELINE_STAGE: Final[str] = "pipeline_stage"
EVENT_SPLIT_COMPLETED: Final[str] = "split_completed"
EVENT_SEGMENT_PROCESSED: Final[str] = "segment_processed"
EVENT_SEGMENT_FAILED: Final[str] = "segment_failed"
EVENT_RECOMBINATION_COMPLETED: Final[str] = "recombination_completed"
EVENT_RECOMBINATION_FAILED: Final[str] = "recombination_failed"
EVENT_PIPELINE_COMPLETED: Final[str] = "pipeline_completed"


class StructuredPipelineObserver:
    """R: Default observer: JSON log line + metrics per event."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or default_logger

    def emit(self, event: str, *, level: int = logging.INFO, **fields: Any) -> None:
        self._log.log(level, event, extra={"event": event, **fields})
        self._record_metrics(event, fields)

    @staticmethod
    def _record_metrics(event: str, fields: dict[str, Any]) -> None:
        elapsed = fields.get("elapsed_seconds")

        if event == EVENT_PIPELINE_STARTED:
            metrics.record_pipeline_request(str(fields.get("task", "unknown")))
        elif event == EVENT_SPLIT_COMPLETED:
            metrics.observe_segments_per_document(int(fields.get("segments_total", 0)))
        elif event in (EVENT_SEGMENT_PROCESSED, EVENT_SEGMENT_FAILED):
            ok = event == EVENT_SEGMENT_PROCESSED
            metrics.record_segment_outcome(ok, str(fields.get("error_kind") or ""))
            if elapsed is not None:
                metrics.observe_backend_call_latency("segment", float(elapsed))
        elif event in (EVENT_RECOMBINATION_COMPLETED, EVENT_RECOMBINATION_FAILED):
            metrics.record_recombination(event == EVENT_RECOMBINATION_FAILED)
            if elapsed is not None:
                metrics.observe_backend_call_latency("recombine", float(elapsed))
