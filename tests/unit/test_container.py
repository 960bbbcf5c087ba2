"""
Name: Composition Root Tests

Responsibilities:
  - Backend selection by provider
  - Pipeline wiring from Settings
"""

import pytest

from longdoc import container
from longdoc.application import LongDocumentRequest
from longdoc.crosscutting.config import Settings, get_settings
from longdoc.domain.entities import DocumentInput, Task
from longdoc.infrastructure.prompts import get_prompt_loader
from longdoc.infrastructure.services import (
    AnthropicTextBackend,
    FakeTextBackend,
    GoogleTextBackend,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def clean_caches():
    def _clear():
        get_settings.cache_clear()
        get_prompt_loader.cache_clear()
        container.get_text_backend.cache_clear()
        container.get_pipeline_observer.cache_clear()
        container.get_pipeline.cache_clear()

    _clear()
    yield
    _clear()


def test_fake_provider():
    backend = container.build_text_backend(Settings(llm_provider="fake"))

    assert isinstance(backend, FakeTextBackend)


def test_anthropic_provider():
    settings = Settings(
        llm_provider="anthropic",
        anthropic_api_key="sk-test",
        anthropic_model_id="claude-x",
    )

    backend = container.build_text_backend(settings)

    assert isinstance(backend, AnthropicTextBackend)
    assert backend.model_id == "claude-x"


def test_google_provider():
    settings = Settings(llm_provider="google", google_api_key="g-test")

    backend = container.build_text_backend(settings)

    assert isinstance(backend, GoogleTextBackend)
    assert backend.model_id == "gemini-1.5-flash"


def test_get_pipeline_uses_settings(monkeypatch, clean_caches):
    monkeypatch.setenv("LLM_PROVIDER", "fake")
    monkeypatch.setenv("MAX_SEGMENT_SIZE", "100")
    request = LongDocumentRequest(
        document=DocumentInput(text="Sentence one. " * 30),
        task=Task.SUMMARIZE,
    )

    pipeline = container.get_pipeline()
    result = pipeline.execute(request)

    assert container.get_pipeline() is pipeline
    assert result.segments_total > 1
    assert result.backend_calls == result.segments_total + 1
