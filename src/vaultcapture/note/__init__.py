from .filename import generate_filename
from .transform import (
    render_structured_note,
    transform_capture,
    transform_markdown,
    transform_structured,
)
from .types import (
    NoteFrontmatter,
    NoteSection,
    NoteType,
    ResponseFormat,
    StructuredNote,
    TransformResult,
)

__all__ = [
    "NoteFrontmatter",
    "NoteSection",
    "NoteType",
    "ResponseFormat",
    "StructuredNote",
    "TransformResult",
    "generate_filename",
    "render_structured_note",
    "transform_capture",
    "transform_markdown",
    "transform_structured",
]
