"""
Name: Prompt Loader (Versioned System Prompts with Frontmatter)

Responsibilities:
  - Load versioned system-prompt templates from `longdoc/prompts/system/`
  - Parse YAML-like frontmatter for metadata (type, version, lang, description)
  - Support safe versioning via settings (v1, v2, ...)
  - Cache loaded templates in-memory per instance
  - Fallback to v1 if configured version template is missing
  - Compose the system instruction for (document kind, task)

Collaborators:
  - crosscutting.config.get_settings (prompt_version, prompt_lang)
  - longdoc/prompts/system/*.md (templates)
  - logger (observability)

Patterns:
  - Repository-like (filesystem-backed templates)
  - Composition (base prompt + task addendum)
  - Implements domain.services.SystemPromptProvider
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Final

from ...crosscutting.logger import logger
from ...domain.entities import Task

PROMPTS_DIR = (Path(__file__).resolve().parents[2] / "prompts").resolve()

SYSTEM_DIR: Final[str] = "system"

PROMPT_DOCUMENT: Final[str] = "document"
PROMPT_TRANSCRIPT: Final[str] = "transcript"
PROMPT_TRANSCRIPT_SUMMARY: Final[str] = "transcript_summary"

DEFAULT_LANG: Final[str] = "en"

_VERSION_RE = re.compile(r"^v\d+$")
_LANG_RE = re.compile(r"^[a-z]{2}$")
_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.DOTALL)


@dataclass
class PromptMetadata:
    """R: Parsed frontmatter metadata from prompt file."""

    type: str = ""
    version: str = ""
    lang: str = ""
    description: str = ""
    extra: dict[str, str] = field(default_factory=dict)


def parse_frontmatter(content: str) -> tuple[PromptMetadata, str]:
    """
    R: Parse frontmatter (`key: value` lines between `---` fences).

    Returns:
        Tuple of (metadata, body_without_frontmatter)
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return PromptMetadata(), content

    metadata = PromptMetadata()
    for line in match.group(1).split("\n"):
        line = line.strip()
        if not line or line.startswith("#") or ":" not in line:
            continue
        key, _, value = line.partition(":")
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key in ("type", "version", "lang", "description"):
            setattr(metadata, key, value)
        else:
            metadata.extra[key] = value

    return metadata, content[match.end() :]


class PromptLoader:
    """
    R: Load and cache system prompts by version.

    CRC:
      Responsibilities:
        - Resolve safe prompt paths (no traversal via version/lang)
        - Load templates with frontmatter parsing and caching
        - Compose system instruction for transcript/document and task
      Collaborators:
        - filesystem (Path.read_text)
        - config (prompt_version, prompt_lang)
      Constraints:
        - Transcript + summarize gets the summarization addendum appended
    """

    def __init__(
        self,
        version: str = "v1",
        lang: str = DEFAULT_LANG,
        *,
        prompts_dir: Path = PROMPTS_DIR,
    ):
        self.version = self._validate_version(version)
        self.lang = self._validate_lang(lang)
        self._prompts_dir = prompts_dir
        self._cache: dict[str, str] = {}
        self._metadata: dict[str, PromptMetadata] = {}

    def metadata(self, name: str) -> PromptMetadata | None:
        """R: Return metadata for a loaded template (None if not loaded yet)."""
        return self._metadata.get(name)

    def get_template(self, name: str) -> str:
        """R: Return template body (without frontmatter), cached."""
        if name not in self._cache:
            self._cache[name] = self._load_with_fallback(name).strip()
        return self._cache[name]

    def system_instruction(self, *, is_transcript: bool, task: Task) -> str:
        """R: System prompt for the document kind; transcripts summarized get the addendum."""
        if not is_transcript:
            return self.get_template(PROMPT_DOCUMENT)

        base = self.get_template(PROMPT_TRANSCRIPT)
        if task is Task.SUMMARIZE:
            return f"{base}\n\n{self.get_template(PROMPT_TRANSCRIPT_SUMMARY)}"
        return base

    @staticmethod
    def _validate_version(version: str) -> str:
        v = (version or "").strip()
        if not _VERSION_RE.match(v):
            raise ValueError(
                f"Invalid prompt version '{version}'. Expected v1, v2, ..."
            )
        return v

    @staticmethod
    def _validate_lang(lang: str) -> str:
        value = (lang or "").strip().lower()
        if not _LANG_RE.match(value):
            raise ValueError(f"Invalid prompt lang '{lang}'. Expected e.g. en, es")
        return value

    def _template_path(self, name: str, version: str) -> Path:
        return self._prompts_dir / SYSTEM_DIR / f"{name}_{version}_{self.lang}.md"

    def _load_for_version(self, name: str, version: str) -> str:
        path = self._template_path(name, version)
        if not path.exists():
            raise FileNotFoundError(f"Prompt template not found: {path}")

        content = path.read_text(encoding="utf-8")
        meta, body = parse_frontmatter(content)
        self._metadata[name] = meta

        logger.info(
            "Loaded prompt template",
            extra={"template": name, "version": version, "chars": len(body)},
        )
        return body

    def _load_with_fallback(self, name: str) -> str:
        try:
            return self._load_for_version(name, self.version)
        except FileNotFoundError:
            if self.version != "v1":
                logger.warning(
                    "Prompt template missing; falling back to v1",
                    extra={"template": name, "requested_version": self.version},
                )
                return self._load_for_version(name, "v1")
            raise


@lru_cache
def get_prompt_loader() -> PromptLoader:
    """R: Singleton PromptLoader configured by settings."""
    from ...crosscutting.config import get_settings

    settings = get_settings()
    return PromptLoader(version=settings.prompt_version, lang=settings.prompt_lang)
