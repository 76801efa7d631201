from __future__ import annotations

import re

_OPENING_FENCE = re.compile(r"^```[A-Za-z]*[ \t]*\r?\n?")
_CLOSING_FENCE = re.compile(r"\r?\n?```$")
_H1_HEADING = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)

UNTITLED = "untitled"


def normalize_markdown(raw: str) -> str:
    """Strip a surrounding ``` fence from model output, leaving the inside intact."""
    content = raw.strip()
    if content.startswith("```"):
        content = _OPENING_FENCE.sub("", content, count=1)
        content = _CLOSING_FENCE.sub("", content, count=1)
        content = content.strip()
    return content


def extract_title(markdown: str) -> str:
    match = _H1_HEADING.search(markdown)
    if match:
        title = match.group(1).strip()
        if title:
            return title
    return UNTITLED
