# longdoc/crosscutting/timing.py
"""
Name: Stage timings for a pipeline run

Responsibilities:
  - Measure wall time per stage (split / segments / recombine) with perf_counter
  - Accumulate repeated measurements of the same stage
  - Export `{stage}_ms` + `total_ms` for logs and `LongDocumentResult.timings`

Collaborators:
  - application/long_document_pipeline.py
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Callable, Iterator


def _to_ms(seconds: float) -> float:
    return round(seconds * 1000, 2)


class StageTimings:
    """
    Reloj de un request: arranca al construirse.

    `measure(stage)` es reentrante por etapa: dos mediciones de "segments" suman.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._started_at = clock()
        self._stage_ms: dict[str, float] = {}

    @contextmanager
    def measure(self, stage: str) -> Iterator[None]:
        began = self._clock()
        try:
            yield
        finally:
            self.record(stage, _to_ms(self._clock() - began))

    def record(self, stage: str, elapsed_ms: float) -> None:
        total = self._stage_ms.get(stage, 0.0) + elapsed_ms
        self._stage_ms[stage] = round(total, 2)

    @property
    def total_ms(self) -> float:
        return _to_ms(self._clock() - self._started_at)

    def to_dict(self) -> dict[str, float]:
        out = {f"{stage}_ms": ms for stage, ms in self._stage_ms.items()}
        out["total_ms"] = self.total_ms
        return out
