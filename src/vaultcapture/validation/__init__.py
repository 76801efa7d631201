from .fields import (
    ALLOWED_TYPES,
    REQUIRED_FIELDS,
    STATUS_TAGS,
    TAG_WHITELIST,
    THEMATIC_TAGS,
    validate_required_fields,
    validate_source,
    validate_tags,
    validate_type,
)
from .frontmatter import extract_frontmatter, parse_frontmatter
from .pipeline import validate_markdown

__all__ = [
    "ALLOWED_TYPES",
    "REQUIRED_FIELDS",
    "STATUS_TAGS",
    "TAG_WHITELIST",
    "THEMATIC_TAGS",
    "extract_frontmatter",
    "parse_frontmatter",
    "validate_markdown",
    "validate_required_fields",
    "validate_source",
    "validate_tags",
    "validate_type",
]
