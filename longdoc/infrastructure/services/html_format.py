"""
Name: Markdown → HTML output normalization

Responsibilities:
  - Turn markdown headings the model still emits into HTML tags
    (`#` → <h2>, `##` → <h3>, `###` → <h4>)
  - Turn runs of `- ` bullets into <ul><li> lists, unless the output already
    contains an HTML list

Collaborators:
  - infrastructure.services.* backends (applied when `render_html` is on)

Notes:
  - The system prompts ask for HTML; this only cleans up what slips through.
"""

from __future__ import annotations

import re

_H1_RE = re.compile(r"^# (.*)$", re.MULTILINE)
_H2_RE = re.compile(r"^## (.*)$", re.MULTILINE)
_H3_RE = re.compile(r"^### (.*)$", re.MULTILINE)
_BULLET_RUN_RE = re.compile(r"^- .*$(?:\n^- .*$)*", re.MULTILINE)


def _bullets_to_list(match: re.Match) -> str:
    items = [line[2:] for line in match.group(0).split("\n")]
    body = "".join(f"  <li>{item}</li>\n" for item in items)
    return f"<ul>\n{body}</ul>"


def markdown_to_html(text: str) -> str:
    """R: Headings + bullet runs to HTML; everything else untouched."""
    if not text:
        return text

    out = _H1_RE.sub(r"<h2>\1</h2>", text)
    out = _H2_RE.sub(r"<h3>\1</h3>", out)
    out = _H3_RE.sub(r"<h4>\1</h4>", out)

    if "<ul>" not in out and "- " in out:
        out = _BULLET_RUN_RE.sub(_bullets_to_list, out)

    return out
