"""Types for structured notes returned by the language model."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from vaultcapture.errors import InvalidStructuredNoteError

NOTE_STATUS = "seedling"
MAX_THEMATIC_TAGS = 2
MIN_SECTIONS = 2


class ResponseFormat(str, Enum):
    """Shape of the note the model is asked to return."""

    MARKDOWN = "markdown"
    STRUCTURED = "structured"

    @classmethod
    def from_value(cls, value: str | None) -> ResponseFormat:
        if value is None:
            return cls.STRUCTURED
        normalized = value.strip().lower()
        for item in cls:
            if item.value == normalized:
                return item
        return cls.STRUCTURED


class NoteType(str, Enum):
    CONCEPT = "concept"
    ACTION = "action"
    HADITH = "hadith"

    @classmethod
    def from_value(cls, value: object, path: str = "type") -> NoteType:
        for item in cls:
            if item.value == value:
                return item
        allowed = ", ".join(item.value for item in cls)
        raise InvalidStructuredNoteError(
            f"Invalid structured note: `{path}` must be one of {allowed}"
        )


def _require_mapping(value: object, path: str) -> Mapping[str, object]:
    if not isinstance(value, Mapping):
        raise InvalidStructuredNoteError(
            f"Invalid structured note: `{path}` must be an object"
        )
    return value


def _require_str(data: Mapping[str, object], key: str, path: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise InvalidStructuredNoteError(
            f"Invalid structured note: `{path}{key}` must be a string"
        )
    return value


def _require_list(data: Mapping[str, object], key: str, path: str) -> list[object]:
    value = data.get(key)
    if not isinstance(value, list):
        raise InvalidStructuredNoteError(
            f"Invalid structured note: `{path}{key}` must be an array"
        )
    return value


@dataclass(frozen=True, slots=True)
class NoteFrontmatter:
    type: NoteType
    source: str
    status: str = NOTE_STATUS
    tags: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: object) -> NoteFrontmatter:
        frontmatter = _require_mapping(data, "frontmatter")
        note_type = NoteType.from_value(frontmatter.get("type"), "frontmatter.type")

        status = _require_str(frontmatter, "status", "frontmatter.")
        if status != NOTE_STATUS:
            raise InvalidStructuredNoteError(
                f"Invalid structured note: `frontmatter.status` must be "
                f'"{NOTE_STATUS}", got "{status}"'
            )

        source = _require_str(frontmatter, "source", "frontmatter.")

        raw_tags = _require_list(frontmatter, "tags", "frontmatter.")
        tags: list[str] = []
        for index, tag in enumerate(raw_tags):
            if not isinstance(tag, str):
                raise InvalidStructuredNoteError(
                    f"Invalid structured note: `frontmatter.tags[{index}]` "
                    "must be a string"
                )
            tags.append(tag.strip())
        if len(tags) > MAX_THEMATIC_TAGS:
            raise InvalidStructuredNoteError(
                f"Invalid structured note: at most {MAX_THEMATIC_TAGS} thematic "
                f"tags are allowed, got {len(tags)}"
            )

        return cls(type=note_type, source=source, status=status, tags=tuple(tags))


@dataclass(frozen=True, slots=True)
class NoteSection:
    heading: str
    content: str

    @classmethod
    def from_mapping(cls, data: object, index: int) -> NoteSection:
        path = f"sections[{index}]."
        section = _require_mapping(data, path.rstrip("."))
        return cls(
            heading=_require_str(section, "heading", path),
            content=_require_str(section, "content", path),
        )


@dataclass(frozen=True, slots=True)
class StructuredNote:
    """A note as produced by the model in structured-output mode."""

    frontmatter: NoteFrontmatter
    title: str
    sections: tuple[NoteSection, ...]

    @classmethod
    def from_mapping(cls, data: object) -> StructuredNote:
        payload = _require_mapping(data, "$")
        frontmatter = NoteFrontmatter.from_mapping(payload.get("frontmatter"))
        title = _require_str(payload, "title", "")
        raw_sections = _require_list(payload, "sections", "")
        if len(raw_sections) < MIN_SECTIONS:
            raise InvalidStructuredNoteError(
                f"Invalid structured note: at least {MIN_SECTIONS} sections are "
                f"required, got {len(raw_sections)}"
            )
        sections = tuple(
            NoteSection.from_mapping(item, index)
            for index, item in enumerate(raw_sections)
        )
        return cls(frontmatter=frontmatter, title=title, sections=sections)

    @classmethod
    def from_json(cls, text: str) -> StructuredNote:
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as exc:
            raise InvalidStructuredNoteError(
                f"Invalid structured note: response is not valid JSON ({exc})"
            ) from exc
        return cls.from_mapping(data)


@dataclass(frozen=True, slots=True)
class TransformResult:
    markdown: str
    filename: str
    title: str
