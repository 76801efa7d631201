from __future__ import annotations

from vaultcapture.utils.note import UNTITLED, extract_title, normalize_markdown


def test_normalize_markdown_strips_fence() -> None:
    raw = "```markdown\n---\ntype: concept\n---\n# T\n```"
    assert normalize_markdown(raw) == "---\ntype: concept\n---\n# T"


def test_normalize_markdown_strips_bare_fence() -> None:
    assert normalize_markdown("```\n# T\n```\n") == "# T"


def test_normalize_markdown_leaves_plain_text() -> None:
    assert normalize_markdown("  # T\n\nbody  ") == "# T\n\nbody"


def test_extract_title_finds_first_h1() -> None:
    markdown = "---\ntype: concept\n---\n\n## Not this\n# La sincérité\n# Second\n"
    assert extract_title(markdown) == "La sincérité"


def test_extract_title_falls_back() -> None:
    assert extract_title("## Only H2\n#NoSpace") == UNTITLED
