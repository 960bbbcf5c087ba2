"""
Name: Document kind inference

Responsibilities:
  - Decide whether a document is an audio transcription from its display name
    when the caller did not say so explicitly.

Notes:
  - Only a fallback: an explicit `is_transcript` from the caller always wins.
"""

from __future__ import annotations

from typing import Final, Optional

_TRANSCRIPT_NAME_MARKERS: Final[tuple[str, ...]] = ("transcription", "audio")
_AUDIO_EXTENSIONS: Final[tuple[str, ...]] = (".mp3", ".wav", ".m4a")


def looks_like_transcript(display_name: str) -> bool:
    """R: True if the name suggests an audio recording / transcription."""
    name = (display_name or "").strip().lower()
    if not name:
        return False
    if any(marker in name for marker in _TRANSCRIPT_NAME_MARKERS):
        return True
    return name.endswith(_AUDIO_EXTENSIONS)


def resolve_is_transcript(display_name: str, is_transcript: Optional[bool]) -> bool:
    """R: Explicit flag if given, otherwise infer from the display name."""
    if is_transcript is not None:
        return bool(is_transcript)
    return looks_like_transcript(display_name)
