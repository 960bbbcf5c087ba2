"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas (Prometheus) del pipeline de documentos largos

Responsabilidades:
    - Definir métricas Prometheus (si la dependencia existe) sin romper el runtime.
    - Proveer funciones pequeñas y estables para registrar eventos/duraciones.
    - Cuidar cardinalidad (NO nombres de documento, NO request_id).
    - Exponer helpers para generar el payload de /metrics del host.

Colaboradores:
    - crosscutting.observer: traduce eventos del pipeline a métricas.

Decisiones de diseño:
    - "Dependencia opcional": si `prometheus_client` no está instalado,
      todo funciona igual (no-op).
    - Registro propio (CollectorRegistry) para no chocar con el del host.
===============================================================================
"""

from __future__ import annotations

from typing import Optional

# -----------------------------------------------------------------------------
# Dependencia opcional (prometheus_client)
# -----------------------------------------------------------------------------

_prometheus_available = False
_registry = None

try:
    from prometheus_client import (  # type: ignore
        CONTENT_TYPE_LATEST,
        CollectorRegistry,
        Counter,
        Histogram,
        generate_latest,
    )

    _prometheus_available = True
    _registry = CollectorRegistry()
except ImportError:
    pass


# -----------------------------------------------------------------------------
# Métricas (variables globales)
# -----------------------------------------------------------------------------

_pipeline_requests_total: Optional["Counter"] = None
_segment_outcomes_total: Optional["Counter"] = None
_recombination_total: Optional["Counter"] = None
_segments_per_document: Optional["Histogram"] = None
_backend_call_latency: Optional["Histogram"] = None


def _init_metrics() -> None:
    """Inicializa métricas (una sola vez)."""
    global _pipeline_requests_total, _segment_outcomes_total
    global _recombination_total, _segments_per_document, _backend_call_latency

    if not _prometheus_available or _pipeline_requests_total is not None:
        return

    _pipeline_requests_total = Counter(
        "longdoc_pipeline_requests_total",
        "Total de ejecuciones del pipeline",
        ["task"],
        registry=_registry,
    )
    _segment_outcomes_total = Counter(
        "longdoc_segment_outcomes_total",
        "Resultados por segmento (ok / failed)",
        ["status", "error_kind"],
        registry=_registry,
    )
    _recombination_total = Counter(
        "longdoc_recombination_total",
        "Resultados de la recombinación (synthesized / fallback)",
        ["status"],
        registry=_registry,
    )
    _segments_per_document = Histogram(
        "longdoc_segments_per_document",
        "Cantidad de segmentos por documento",
        buckets=(1, 2, 3, 5, 8, 13, 21, 34, 55),
        registry=_registry,
    )
    _backend_call_latency = Histogram(
        "longdoc_backend_call_seconds",
        "Latencia de llamadas al backend de generación",
        ["stage"],
        buckets=(0.25, 0.5, 1, 2, 5, 10, 20, 40, 60, 120),
        registry=_registry,
    )


_init_metrics()


# -----------------------------------------------------------------------------
# API pública (helpers de registro)
# -----------------------------------------------------------------------------


def record_pipeline_request(task: str) -> None:
    """Cuenta una ejecución del pipeline por tipo de tarea."""
    if _pipeline_requests_total:
        _pipeline_requests_total.labels(task=task).inc()


def record_segment_outcome(ok: bool, error_kind: str = "") -> None:
    """Cuenta el resultado de un segmento (error_kind vacío si ok)."""
    if _segment_outcomes_total:
        _segment_outcomes_total.labels(
            status="ok" if ok else "failed",
            error_kind=error_kind or "none",
        ).inc()


def record_recombination(used_fallback: bool) -> None:
    """Cuenta si la recombinación fue sintetizada o cayó al fallback."""
    if _recombination_total:
        _recombination_total.labels(
            status="fallback" if used_fallback else "synthesized"
        ).inc()


def observe_segments_per_document(count: int) -> None:
    if _segments_per_document:
        _segments_per_document.observe(count)


def observe_backend_call_latency(stage: str, seconds: float) -> None:
    """stage ∈ {segment, recombine}."""
    if _backend_call_latency:
        _backend_call_latency.labels(stage=stage).observe(seconds)


# -----------------------------------------------------------------------------
# Exposición
# -----------------------------------------------------------------------------


def get_metrics_response() -> tuple[bytes, str]:
    """Genera el body y content-type para un endpoint /metrics del host."""
    if not _prometheus_available:
        return b"# prometheus_client no instalado\n", "text/plain"
    return generate_latest(_registry), CONTENT_TYPE_LATEST


def is_prometheus_available() -> bool:
    """Indica si prometheus_client está instalado."""
    return _prometheus_available
