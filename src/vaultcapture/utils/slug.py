"""Minimal slugify helper."""

from __future__ import annotations

import re
import unicodedata

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_SEPARATORS = re.compile(r"[\s_]+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-+")

FALLBACK_SLUG = "untitled"


def slugify(value: str) -> str:
    normalized = unicodedata.normalize("NFD", value.lower())
    text = _COMBINING_MARKS.sub("", normalized)
    text = _SEPARATORS.sub("-", text)
    text = _DISALLOWED.sub("", text)
    slug = _HYPHEN_RUNS.sub("-", text).strip("-")
    return slug or FALLBACK_SLUG
