"""
===============================================================================
TARJETA CRC — longdoc/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer el pipeline (backend, prompts, observer) siguiendo DIP.
  - Elegir el backend de generación de texto según Settings.llm_provider.
  - Mantener singletons con caching (lru_cache) para recursos pesados.

Colaboradores:
  - longdoc.crosscutting.config.get_settings
  - longdoc.infrastructure.services.* (backends)
  - longdoc.infrastructure.prompts.get_prompt_loader
  - longdoc.application.LongDocumentPipeline

Patrones aplicados:
  - Composition Root
  - Lazy singletons con lru_cache

Notas:
  - Este archivo NO contiene lógica de negocio.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application import LongDocumentPipeline
from .crosscutting.config import Settings, get_settings
from .crosscutting.observer import StructuredPipelineObserver
from .domain.services import TextGenerationBackend
from .infrastructure.prompts import get_prompt_loader
from .infrastructure.services import (
    AnthropicTextBackend,
    FakeTextBackend,
    GoogleTextBackend,
)


def build_text_backend(settings: Settings) -> TextGenerationBackend:
    """Backend según `llm_provider` (fake en test/dev sin credenciales)."""
    if settings.llm_provider == "fake":
        return FakeTextBackend()
    if settings.llm_provider == "google":
        return GoogleTextBackend(
            settings.google_api_key,
            model_id=settings.google_model_id,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
            default_timeout_seconds=settings.llm_timeout_seconds,
            render_html=settings.render_html,
        )
    return AnthropicTextBackend(
        settings.anthropic_api_key,
        model_id=settings.anthropic_model_id,
        api_url=settings.anthropic_api_url,
        api_version=settings.anthropic_version,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
        default_timeout_seconds=settings.llm_timeout_seconds,
        render_html=settings.render_html,
    )


@lru_cache(maxsize=1)
def get_text_backend() -> TextGenerationBackend:
    return build_text_backend(get_settings())


@lru_cache(maxsize=1)
def get_pipeline_observer() -> StructuredPipelineObserver:
    return StructuredPipelineObserver()


@lru_cache(maxsize=1)
def get_pipeline() -> LongDocumentPipeline:
    """Pipeline listo para usar, configurado desde Settings."""
    settings = get_settings()
    return LongDocumentPipeline(
        get_text_backend(),
        system_prompts=get_prompt_loader(),
        max_segment_size=settings.max_segment_size,
        timeout_seconds=settings.llm_timeout_seconds,
        observer=get_pipeline_observer(),
    )
