from __future__ import annotations

from .fields import (
    validate_required_fields,
    validate_source,
    validate_tags,
    validate_type,
)
from .frontmatter import extract_frontmatter, parse_frontmatter


def validate_markdown(markdown: str) -> None:
    """Validate a note document, raising the first NoteValidationError found.

    Never corrects the input; a valid document returns None.
    """
    frontmatter = parse_frontmatter(extract_frontmatter(markdown))

    validate_required_fields(frontmatter)

    validate_type(frontmatter["type"])
    validate_source(frontmatter["source"])
    validate_tags(frontmatter["tags"])
