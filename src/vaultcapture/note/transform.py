"""Turn model output into commit-ready Markdown plus a filename.

Pure functions: apart from the clock and the filename suffix, output depends
only on the input. Validation is done separately.
"""

from __future__ import annotations

import json
import random
import re
from datetime import datetime

from vaultcapture.utils.note import extract_title

from .filename import generate_filename
from .types import ResponseFormat, StructuredNote, TransformResult

_LINE_BREAKS = re.compile(r"\r\n|\r|\n")


def _single_line(text: str) -> str:
    return _LINE_BREAKS.sub(" ", text).strip()


def build_tags(note: StructuredNote) -> list[str]:
    frontmatter = note.frontmatter
    return [f"status/{frontmatter.status}", *frontmatter.tags]


def render_frontmatter(note: StructuredNote) -> str:
    lines = [
        "---",
        f"type: {note.frontmatter.type.value}",
        f"source: {json.dumps(note.frontmatter.source, ensure_ascii=False)}",
        "tags:",
    ]
    lines.extend(f"  - {tag}" for tag in build_tags(note))
    lines.append("---")
    return "\n".join(lines)


def render_structured_note(note: StructuredNote) -> str:
    blocks = [render_frontmatter(note), f"# {_single_line(note.title)}"]
    for section in note.sections:
        blocks.append(f"## {_single_line(section.heading)}\n\n{section.content.strip()}")
    return "\n\n".join(blocks) + "\n"


def transform_markdown(
    markdown: str,
    *,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> TransformResult:
    """Keep already-formatted Markdown as-is and name it after its first H1."""
    title = extract_title(markdown)
    filename = generate_filename(title, now or datetime.now(), rng=rng)
    return TransformResult(markdown=markdown, filename=filename, title=title)


def transform_structured(
    payload: str | StructuredNote,
    *,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> TransformResult:
    note = (
        payload
        if isinstance(payload, StructuredNote)
        else StructuredNote.from_json(payload)
    )
    title = _single_line(note.title)
    filename = generate_filename(title, now or datetime.now(), rng=rng)
    return TransformResult(
        markdown=render_structured_note(note), filename=filename, title=title
    )


def transform_capture(
    response: str,
    response_format: ResponseFormat,
    *,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> TransformResult:
    if response_format is ResponseFormat.STRUCTURED:
        return transform_structured(response, now=now, rng=rng)
    return transform_markdown(response, now=now, rng=rng)
