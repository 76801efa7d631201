from __future__ import annotations

import base64
import json
import re
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pytest

from vaultcapture.errors import GitHubAPIError, LLMAPIError
from vaultcapture.note.types import ResponseFormat
from vaultcapture.services import CaptureHandler, CaptureRequest
from vaultcapture.services.capture import INTERNAL_ERROR
from vaultcapture.validation import validate_markdown

FILENAME = re.compile(r"2026-01-05-lesprit-la-matiere-[0-9a-z]{5}\.md")


def _body(**fields: object) -> str:
    return json.dumps({"projectPath": "Dhikr", **fields})


def test_capture_commits_validated_note(
    handler: CaptureHandler, llm_client: Any, github_client: Any
) -> None:
    result = handler.handle(_body(text="le dhikr et le cœur"))

    assert result.status_code == 200
    assert result.body["success"] is True
    filename = result.body["filename"]
    assert FILENAME.fullmatch(filename)
    assert "error" not in result.body

    [(path, content, message)] = github_client.commits
    assert path == f"00_Inbox/{filename}"
    assert message == f"feat(capture): add {filename}"
    assert content.startswith("---\ntype: concept\n")
    validate_markdown(content)

    [context] = llm_client.contexts
    assert context.text == "le dhikr et le cœur"
    assert context.project_path == "Dhikr"
    assert context.response_format is ResponseFormat.STRUCTURED


def test_capture_uses_configured_notes_path(make_handler: Any, github_client: Any) -> None:
    result = make_handler(notes_path="Inbox/Captures").handle(_body(text="x"))

    assert result.status_code == 200
    [(path, _content, _message)] = github_client.commits
    assert path == f"Inbox/Captures/{result.body['filename']}"


def test_capture_with_image_only(handler: CaptureHandler, llm_client: Any) -> None:
    image = base64.b64encode(b"fake").decode("ascii")
    result = handler.handle(_body(imageBase64=f"data:image/png;base64,{image}"))

    assert result.status_code == 200
    [context] = llm_client.contexts
    assert context.text == ""
    assert context.image is not None
    assert context.image.mime_type == "image/png"


@pytest.mark.parametrize(
    ("body", "message"),
    [
        (None, "Missing request body"),
        ("   ", "Missing request body"),
        ("{not json", "Request body is not valid JSON"),
        ("[1, 2]", "Request body must be a JSON object"),
        (json.dumps({"text": "x"}), 'Missing or empty "projectPath"'),
        (json.dumps({"projectPath": "Dhikr"}), 'Missing "text" or "imageBase64"'),
        (
            json.dumps({"projectPath": "Dhikr", "text": "  ", "imageBase64": ""}),
            'Missing "text" or "imageBase64"',
        ),
    ],
)
def test_unusable_requests_fail_before_any_call(
    handler: CaptureHandler,
    llm_client: Any,
    github_client: Any,
    caplog: pytest.LogCaptureFixture,
    body: str | None,
    message: str,
) -> None:
    result = handler.handle(body)

    assert result.status_code == 500
    assert result.body == {"success": False, "error": INTERNAL_ERROR}
    assert message in caplog.text
    assert llm_client.contexts == []
    assert github_client.commits == []


def test_invalid_note_is_never_committed(
    make_handler: Any, llm_client: Any, github_client: Any
) -> None:
    llm_client.content = "# No frontmatter\n\nJust text."

    result = make_handler(response_format="markdown").handle(_body(text="x"))

    assert result.status_code == 400
    assert result.body["success"] is False
    assert "Missing YAML frontmatter" in result.body["error"]
    assert github_client.commits == []


def test_markdown_mode_keeps_model_output(
    make_handler: Any, llm_client: Any, github_client: Any
) -> None:
    llm_client.content = (
        "```markdown\n---\ntype: action\nsource: [[Livre - Les mérites du dhikr]]\n"
        "tags:\n  - status/seedling\n---\n\n# Crème Brûlée & Çava ?\n\nCorps.\n```"
    )

    result = make_handler(response_format="markdown").handle(_body(text="x"))

    assert result.status_code == 200
    assert result.body["filename"].startswith("2026-01-05-creme-brulee-cava-")
    [(_path, content, _message)] = github_client.commits
    assert content.startswith("---\ntype: action\n")
    assert "```" not in content
    assert llm_client.contexts[0].response_format is ResponseFormat.MARKDOWN


def test_structured_shape_error_is_a_bad_request(
    handler: CaptureHandler, llm_client: Any, github_client: Any
) -> None:
    llm_client.content = '{"title": "x"}'

    result = handler.handle(_body(text="x"))

    assert result.status_code == 400
    assert "Invalid structured note" in result.body["error"]
    assert github_client.commits == []


def test_llm_failure_is_internal_error(
    handler: CaptureHandler, llm_client: Any, github_client: Any
) -> None:
    llm_client.content = LLMAPIError("OpenAI API error (500)")

    result = handler.handle(_body(text="x"))

    assert result.status_code == 500
    assert result.body == {"success": False, "error": INTERNAL_ERROR}
    assert github_client.commits == []


def test_github_failure_is_internal_error(
    handler: CaptureHandler, github_client: Any
) -> None:
    github_client.error = GitHubAPIError("GitHub API error (401): Bad credentials")

    result = handler.handle(_body(text="x"))

    assert result.status_code == 500
    assert result.body["error"] == INTERNAL_ERROR


def test_missing_configuration_is_internal_error(
    make_handler: Any, llm_client: Any
) -> None:
    result = make_handler(github_token="").handle(_body(text="x"))

    assert result.status_code == 500
    assert result.body["error"] == INTERNAL_ERROR
    assert llm_client.contexts == []


def test_build_note_does_not_commit(
    handler: CaptureHandler, github_client: Any
) -> None:
    result = handler.build_note(CaptureRequest(project_path="Dhikr", text="x"))

    assert FILENAME.fullmatch(result.filename)
    assert result.title == "L'esprit & La Matière"
    assert github_client.commits == []


def test_close_closes_clients(
    handler: CaptureHandler, llm_client: Any, github_client: Any
) -> None:
    handler.close()
    assert llm_client.closed is True
    assert github_client.closed is True


def test_concurrent_captures_share_one_llm_client(
    settings: Any,
    llm_client: Any,
    github_client: Any,
    fixed_now: Any,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    created: list[Any] = []

    def slow_create_llm_client(values: Any, system_prompt: str) -> Any:
        time.sleep(0.05)
        created.append(values)
        return llm_client

    monkeypatch.setattr(
        "vaultcapture.services.capture.create_llm_client", slow_create_llm_client
    )
    handler = CaptureHandler(
        settings, github_client=github_client, clock=lambda: fixed_now
    )

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(handler.handle, [_body(text="x")] * 8))

    assert [result.status_code for result in results] == [200] * 8
    assert len(created) == 1
    assert len(github_client.commits) == 8
