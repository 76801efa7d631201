from __future__ import annotations

import pytest

from vaultcapture.errors import (
    InvalidSourceFormatError,
    InvalidTagsError,
    InvalidTypeError,
    MalformedYamlError,
    MissingFieldError,
    MissingFrontmatterError,
    MissingStatusTagError,
    NoteValidationError,
)
from vaultcapture.validation import validate_markdown

VALID_NOTE = """---
type: concept
source: [[Livre - Les mérites du dhikr]]
tags:
  - status/seedling
  - spiritualité
---

# La sincérité

## Idée centrale

Le dhikr purifie le cœur.
"""


def test_valid_note_passes() -> None:
    assert validate_markdown(VALID_NOTE) is None


def test_validation_is_repeatable() -> None:
    validate_markdown(VALID_NOTE)
    validate_markdown(VALID_NOTE)


def test_hash_tags_in_inline_list_pass() -> None:
    validate_markdown(
        "---\ntype: action\nsource: [[A]]\ntags: [#status/seedling, #fiqh]\n---\n"
    )


@pytest.mark.parametrize(
    ("markdown", "error"),
    [
        ("# no frontmatter", MissingFrontmatterError),
        ("---\ntype concept\n---\n", MalformedYamlError),
        ("---\ntype: concept\ntags:\n  - status/seedling\n---\n", MissingFieldError),
        (
            "---\ntype: idea\nsource: [[A]]\ntags:\n  - status/seedling\n---\n",
            InvalidTypeError,
        ),
        (
            "---\ntype: concept\nsource: A\ntags:\n  - status/seedling\n---\n",
            InvalidSourceFormatError,
        ),
        (
            "---\ntype: concept\nsource: [[A]]\ntags:\n  - status/seedling\n"
            "  - random\n---\n",
            InvalidTagsError,
        ),
        (
            "---\ntype: concept\nsource: [[A]]\ntags:\n  - fiqh\n---\n",
            MissingStatusTagError,
        ),
    ],
)
def test_first_failure_is_reported(markdown: str, error: type[Exception]) -> None:
    with pytest.raises(error):
        validate_markdown(markdown)


def test_type_is_checked_before_source() -> None:
    with pytest.raises(InvalidTypeError):
        validate_markdown("---\ntype: x\nsource: y\ntags: []\n---\n")


def test_all_failures_share_a_base_class() -> None:
    with pytest.raises(NoteValidationError):
        validate_markdown("nothing here")


@pytest.mark.parametrize(
    "tags_block",
    [
        "tags:\n  - status/seedling\n  - fiqh",
        "tags: [status/seedling, fiqh]",
        "tags: #status/seedling #fiqh",
    ],
)
def test_tag_representations_validate_identically(tags_block: str) -> None:
    validate_markdown(f"---\ntype: action\nsource: [[A]]\n{tags_block}\n---\n\n# T\n")
