"""Field checks applied to a parsed frontmatter mapping.

Tags are compared without their leading `#`: `#status/seedling`,
`status/seedling` and `"status/seedling"` in a list are the same tag.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from vaultcapture.errors import (
    InvalidSourceFormatError,
    InvalidTagsError,
    InvalidTypeError,
    MissingFieldError,
    MissingStatusTagError,
)

ALLOWED_TYPES: tuple[str, ...] = ("concept", "action", "hadith")
STATUS_TAGS: tuple[str, ...] = ("status/seedling",)
THEMATIC_TAGS: tuple[str, ...] = ("spiritualité", "cœur", "fiqh", "comportement")
TAG_WHITELIST: tuple[str, ...] = STATUS_TAGS + THEMATIC_TAGS
REQUIRED_FIELDS: tuple[str, ...] = ("type", "source", "tags")

_TAG_SEPARATORS = re.compile(r"[\s,]+")


def normalize_tag(tag: str) -> str:
    tag = tag.strip()
    if len(tag) >= 2 and tag[0] == tag[-1] and tag[0] in {'"', "'"}:
        tag = tag[1:-1].strip()
    return tag[1:] if tag.startswith("#") else tag


def _display(tags: tuple[str, ...]) -> list[str]:
    return [f"#{tag}" for tag in tags]


def validate_required_fields(frontmatter: Mapping[str, object]) -> None:
    for field in REQUIRED_FIELDS:
        if frontmatter.get(field) is None:
            raise MissingFieldError(field)


def validate_type(value: object) -> None:
    if not isinstance(value, str):
        raise InvalidTypeError(
            f"Invalid type: expected string, got {type(value).__name__}"
        )
    if value not in ALLOWED_TYPES:
        raise InvalidTypeError(
            f'Invalid type "{value}". Allowed: {", ".join(ALLOWED_TYPES)}'
        )


def validate_source(value: object) -> None:
    if not isinstance(value, str):
        raise InvalidSourceFormatError(
            f"Invalid source: expected string, got {type(value).__name__}"
        )
    source = value.strip()
    # `source: "[[...]]"` is how generated notes quote the wikilink.
    if len(source) >= 2 and source[0] == source[-1] and source[0] in {'"', "'"}:
        source = source[1:-1]
    if not source.startswith("[[") or not source.endswith("]]"):
        raise InvalidSourceFormatError(
            "Invalid source format: must be a wikilink like "
            "[[Livre - Les mérites du dhikr]]"
        )


def collect_tags(value: object) -> list[str]:
    """Return the raw tag tokens of a `tags` value, before normalization."""
    if isinstance(value, str):
        return [token for token in _TAG_SEPARATORS.split(value) if token.startswith("#")]
    if isinstance(value, list):
        return [str(item).strip() for item in value]
    raise InvalidTagsError(
        [],
        message=f"Invalid tags: expected string or list, got {type(value).__name__}",
    )


def validate_tags(value: object) -> None:
    raw_tags = collect_tags(value)

    invalid = [tag for tag in raw_tags if normalize_tag(tag) not in TAG_WHITELIST]
    if invalid:
        raise InvalidTagsError(invalid, allowed=_display(TAG_WHITELIST))

    if not any(normalize_tag(tag) in STATUS_TAGS for tag in raw_tags):
        raise MissingStatusTagError(
            "Missing required status tag. Must include one of: "
            + ", ".join(_display(STATUS_TAGS))
        )
