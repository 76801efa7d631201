from __future__ import annotations

import pytest

from vaultcapture.errors import (
    InvalidSourceFormatError,
    InvalidTagsError,
    InvalidTypeError,
    MissingFieldError,
    MissingStatusTagError,
)
from vaultcapture.validation import fields


def test_normalize_tag_strips_hash_and_quotes() -> None:
    assert fields.normalize_tag("#status/seedling") == "status/seedling"
    assert fields.normalize_tag('"#fiqh"') == "fiqh"
    assert fields.normalize_tag("  cœur ") == "cœur"


def test_validate_required_fields_reports_first_missing() -> None:
    with pytest.raises(MissingFieldError) as excinfo:
        fields.validate_required_fields({"type": "concept", "tags": []})
    assert excinfo.value.field_name == "source"
    assert str(excinfo.value) == "Missing required field: source"


def test_validate_required_fields_accepts_empty_values() -> None:
    fields.validate_required_fields({"type": "", "source": "", "tags": []})


@pytest.mark.parametrize("value", ["concept", "action", "hadith"])
def test_validate_type_accepts_allowed(value: str) -> None:
    fields.validate_type(value)


@pytest.mark.parametrize("value", ["Concept", "idea", ["concept"]])
def test_validate_type_rejects(value: object) -> None:
    with pytest.raises(InvalidTypeError):
        fields.validate_type(value)


@pytest.mark.parametrize("value", ["[[A]]", '"[[Livre - X]]"', "'[[B]]'"])
def test_validate_source_accepts_wikilinks(value: str) -> None:
    fields.validate_source(value)


@pytest.mark.parametrize("value", ["A", "[A]", "[[A]", "http://x", ["[[A]]"]])
def test_validate_source_rejects(value: object) -> None:
    with pytest.raises(InvalidSourceFormatError):
        fields.validate_source(value)


def test_tag_representation_does_not_change_outcome() -> None:
    for value in (
        ["status/seedling", "fiqh"],
        ["#status/seedling", "#fiqh"],
        ['"#status/seedling"', "'fiqh'"],
        "#status/seedling #fiqh",
        "#status/seedling, #fiqh",
    ):
        fields.validate_tags(value)


def test_string_tags_ignore_words_without_hash() -> None:
    assert fields.collect_tags("#status/seedling note #cœur") == [
        "#status/seedling",
        "#cœur",
    ]


def test_invalid_tags_are_reported_together() -> None:
    with pytest.raises(InvalidTagsError) as excinfo:
        fields.validate_tags(["status/seedling", "foo", "fiqh", "#bar"])
    assert excinfo.value.tags == ("foo", "#bar")
    message = str(excinfo.value)
    assert "foo" in message and "#bar" in message
    assert "#status/seedling" in message


def test_invalid_tags_win_over_missing_status() -> None:
    with pytest.raises(InvalidTagsError):
        fields.validate_tags(["foo"])


def test_missing_status_tag() -> None:
    with pytest.raises(MissingStatusTagError) as excinfo:
        fields.validate_tags(["fiqh", "cœur"])
    assert "#status/seedling" in str(excinfo.value)


def test_empty_tags_miss_status() -> None:
    with pytest.raises(MissingStatusTagError):
        fields.validate_tags([])


def test_tags_of_wrong_type() -> None:
    with pytest.raises(InvalidTagsError):
        fields.validate_tags(3)
