"""
Name: Prompt Loader Unit Tests

Responsibilities:
  - Load packaged system prompts (frontmatter stripped, cached)
  - Compose the system instruction by document kind and task
  - Version fallback and input validation

Notes:
  - Uses tmp_path for isolated prompt directories
"""

import pytest

from longdoc.domain.entities import Task
from longdoc.infrastructure.prompts.loader import PromptLoader, parse_frontmatter


@pytest.mark.unit
class TestPromptLoader:
    """Test suite for PromptLoader class."""

    def test_loader_defaults(self):
        loader = PromptLoader()

        assert loader.version == "v1"
        assert loader.lang == "en"

    def test_document_instruction(self, prompt_loader):
        text = prompt_loader.system_instruction(is_transcript=False, task=Task.SUMMARIZE)

        assert "about a document" in text
        assert not text.startswith("---")

    def test_transcript_answer_has_no_summary_addendum(self, prompt_loader):
        text = prompt_loader.system_instruction(
            is_transcript=True, task=Task.ANSWER_QUESTION
        )

        assert "transcribed audio" in text
        assert "summarization request" not in text

    def test_transcript_summary_appends_addendum(self, prompt_loader):
        text = prompt_loader.system_instruction(is_transcript=True, task=Task.SUMMARIZE)

        assert "transcribed audio" in text
        assert text.rstrip().endswith("include a brief conclusion")
        assert "summarization request" in text

    def test_template_cached(self, prompt_loader):
        first = prompt_loader.get_template("document")

        assert prompt_loader.get_template("document") is first

    def test_metadata_parsed(self, prompt_loader):
        prompt_loader.get_template("transcript")

        meta = prompt_loader.metadata("transcript")
        assert meta.type == "system"
        assert meta.version == "v1"
        assert meta.lang == "en"

    def test_missing_version_falls_back_to_v1(self):
        loader = PromptLoader(version="v9")

        assert loader.get_template("document") == PromptLoader().get_template("document")

    def test_missing_template_raises(self, tmp_path):
        loader = PromptLoader(prompts_dir=tmp_path)

        with pytest.raises(FileNotFoundError):
            loader.get_template("document")

    def test_custom_prompts_dir(self, tmp_path):
        system_dir = tmp_path / "system"
        system_dir.mkdir()
        (system_dir / "document_v1_es.md").write_text(
            "---\ntype: system\nversion: v1\nlang: es\n---\nResponder solo del documento.\n",
            encoding="utf-8",
        )
        loader = PromptLoader(lang="es", prompts_dir=tmp_path)

        text = loader.system_instruction(is_transcript=False, task=Task.SUMMARIZE)

        assert text == "Responder solo del documento."

    @pytest.mark.parametrize("version", ["1", "../v1", "v1/../x", ""])
    def test_invalid_version_rejected(self, version):
        with pytest.raises(ValueError):
            PromptLoader(version=version)

    @pytest.mark.parametrize("lang", ["eng", "e/", ""])
    def test_invalid_lang_rejected(self, lang):
        with pytest.raises(ValueError):
            PromptLoader(lang=lang)


@pytest.mark.unit
class TestFrontmatter:
    def test_without_frontmatter_returns_content(self):
        meta, body = parse_frontmatter("plain body")

        assert body == "plain body"
        assert meta.type == ""

    def test_extra_keys_preserved(self):
        meta, body = parse_frontmatter("---\ntype: system\nowner: 'docs'\n---\nBody")

        assert meta.extra == {"owner": "docs"}
        assert body == "Body"


@pytest.mark.unit
class TestPromptLoaderSingleton:
    def test_get_prompt_loader_uses_settings(self, monkeypatch):
        from longdoc.crosscutting.config import get_settings
        from longdoc.infrastructure.prompts.loader import get_prompt_loader

        monkeypatch.setenv("PROMPT_VERSION", "v2")
        get_settings.cache_clear()
        get_prompt_loader.cache_clear()
        try:
            loader = get_prompt_loader()
            assert loader.version == "v2"
        finally:
            get_prompt_loader.cache_clear()
            get_settings.cache_clear()
