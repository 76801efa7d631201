"""Frontmatter extraction and the flat YAML subset used by vault notes.

Only the shapes the note format needs are understood: `key: value` scalars,
inline bracketed lists (`key: [a, "b"]`) and indented dash lists under an
empty key. Nested mappings, comments and multi-line scalars are rejected.
A value starting with `[[` is a wikilink and stays a plain string.
"""

from __future__ import annotations

import re

from vaultcapture.errors import MalformedYamlError, MissingFrontmatterError

FrontmatterValue = str | list[str]

DELIMITER = "---"

_LIST_ITEM = re.compile(r"^\s+-\s*(.*)$")
_KEY_VALUE = re.compile(r"^([a-zA-Z_][a-zA-Z0-9_]*)\s*:\s*(.*)$")
_LINE_BREAK = re.compile(r"\r?\n")


def extract_frontmatter(markdown: str) -> str:
    """Return the raw text between the opening `---` line and the next `---` line."""
    lines = _LINE_BREAK.split(markdown.lstrip())
    if not lines or lines[0].rstrip() != DELIMITER:
        raise MissingFrontmatterError()
    for end_idx in range(1, len(lines)):
        if lines[end_idx].rstrip() == DELIMITER:
            block = "\n".join(lines[1:end_idx])
            if not block.strip():
                raise MissingFrontmatterError()
            return block
    raise MissingFrontmatterError()


def _unquote(item: str) -> str:
    if len(item) >= 2 and item[0] == item[-1] and item[0] in {'"', "'"}:
        return item[1:-1]
    return item


def _parse_inline_list(value: str) -> list[str]:
    raw = value[1:-1].strip()
    if not raw:
        return []
    items: list[str] = []
    for part in raw.split(","):
        item = _unquote(part.strip())
        if item:
            items.append(item)
    return items


def parse_frontmatter(text: str) -> dict[str, FrontmatterValue]:
    result: dict[str, FrontmatterValue] = {}
    current_key: str | None = None
    current_list: list[str] | None = None

    for line_number, line in enumerate(_LINE_BREAK.split(text), start=1):
        if not line.strip():
            continue

        if item_match := _LIST_ITEM.match(line):
            if current_key is None or current_list is None:
                raise MalformedYamlError(
                    line_number, line, "Array item without parent key"
                )
            current_list.append(item_match.group(1).strip())
            continue

        key_match = _KEY_VALUE.match(line)
        if key_match is None:
            raise MalformedYamlError(line_number, line)

        if current_key is not None and current_list is not None:
            result[current_key] = current_list

        current_key = key_match.group(1)
        value = key_match.group(2).strip()
        if value.startswith("[") and value.endswith("]") and not value.startswith("[["):
            result[current_key] = _parse_inline_list(value)
            current_list = None
        elif value == "":
            current_list = []
        else:
            result[current_key] = value
            current_list = None

    if current_key is not None and current_list is not None:
        result[current_key] = current_list

    return result
