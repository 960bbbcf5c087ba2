"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure a credential-free test environment (fake backend)
  - Provide reusable fixtures: fake backend, recording observer, pipeline
  - Provide sample long texts with predictable segment boundaries

Notes:
  - Fixtures are auto-discovered by pytest
  - Settings never read the developer's .env during tests
"""

import logging
import os
import sys
from pathlib import Path
from typing import Any

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LLM_PROVIDER", "fake")
os.environ.setdefault("LOG_JSON", "true")

from longdoc.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from longdoc.application import LongDocumentPipeline  # noqa: E402
from longdoc.domain.entities import Task  # noqa: E402
from longdoc.infrastructure.prompts import PromptLoader  # noqa: E402
from longdoc.infrastructure.services import FakeTextBackend  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


class RecordingObserver:
    """R: PipelineObserver double that keeps every emitted event."""

    def __init__(self) -> None:
        self.events: list[tuple[str, int, dict[str, Any]]] = []

    def emit(self, event: str, *, level: int = logging.INFO, **fields: Any) -> None:
        self.events.append((event, level, fields))

    def names(self) -> list[str]:
        return [name for name, _, _ in self.events]

    def of(self, event: str) -> list[dict[str, Any]]:
        return [fields for name, _, fields in self.events if name == event]


class StaticPrompts:
    """R: SystemPromptProvider double with recognizable instructions."""

    def system_instruction(self, *, is_transcript: bool, task: Task) -> str:
        kind = "transcript" if is_transcript else "document"
        return f"SYSTEM[{kind}:{task.value}]"


# ============================================================================
# Doubles
# ============================================================================


@pytest.fixture
def fake_backend() -> FakeTextBackend:
    """R: Deterministic backend with no injected failures."""
    return FakeTextBackend()


@pytest.fixture
def recording_observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def static_prompts() -> StaticPrompts:
    return StaticPrompts()


@pytest.fixture
def prompt_loader() -> PromptLoader:
    """R: Loader over the packaged v1/en system prompts."""
    return PromptLoader(version="v1", lang="en")


@pytest.fixture
def make_pipeline(recording_observer, static_prompts):
    """R: Factory: pipeline over a given backend with test doubles wired in."""

    def _make(backend, *, max_segment_size: int = 8000, timeout_seconds=None):
        return LongDocumentPipeline(
            backend,
            system_prompts=static_prompts,
            max_segment_size=max_segment_size,
            timeout_seconds=timeout_seconds,
            observer=recording_observer,
        )

    return _make


# ============================================================================
# Sample texts
# ============================================================================


@pytest.fixture
def three_part_text() -> str:
    """
    R: 17000 chars with paragraph breaks at 7800 and 15702.

    With max_segment_size=8000 it splits into exactly 3 segments.
    """
    return "a" * 7800 + "\n\n" + "b" * 7900 + "\n\n" + "c" * 1296


@pytest.fixture
def short_text() -> str:
    return "The quarterly report shows revenue grew 12%. Costs were flat."
