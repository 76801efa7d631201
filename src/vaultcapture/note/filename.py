"""Filename generation for captured notes."""

from __future__ import annotations

import random
import string
from datetime import date

from vaultcapture.utils.slug import slugify

SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
SUFFIX_LENGTH = 5


def format_date(when: date) -> str:
    """Return `YYYY-MM-DD` from the local calendar fields of `when`."""
    return f"{when.year:04d}-{when.month:02d}-{when.day:02d}"


def random_suffix(
    rng: random.Random | None = None, length: int = SUFFIX_LENGTH
) -> str:
    chooser = rng or random
    return "".join(chooser.choice(SUFFIX_ALPHABET) for _ in range(length))


def generate_filename(
    title: str,
    when: date,
    *,
    rng: random.Random | None = None,
    suffix_length: int = SUFFIX_LENGTH,
) -> str:
    """Build `{date}-{slug}-{suffix}.md` for a note title.

    `when` may be a `date` or a naive/aware `datetime`; its own calendar fields
    are used as-is. A `suffix_length` of 0 drops the suffix segment.
    """
    parts = [format_date(when), slugify(title)]
    if suffix_length > 0:
        parts.append(random_suffix(rng, suffix_length))
    return "-".join(parts) + ".md"
