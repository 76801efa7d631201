import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from vaultcapture.errors import CaptureRequestError
from vaultcapture.llm.types import ImageAttachment


@dataclass(frozen=True, slots=True)
class CaptureRequest:
    project_path: str
    text: str = ""
    image: ImageAttachment | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CaptureRequest":
        project_path = data.get("projectPath")
        if not isinstance(project_path, str) or not project_path.strip():
            raise CaptureRequestError('Missing or empty "projectPath"')

        text = data.get("text")
        if text is None:
            text = ""
        if not isinstance(text, str):
            raise CaptureRequestError('Invalid "text": expected a string')

        raw_image = data.get("imageBase64")
        image = None
        if raw_image is not None:
            if not isinstance(raw_image, str):
                raise CaptureRequestError('Invalid "imageBase64": expected a string')
            if raw_image.strip():
                image = ImageAttachment.from_base64(raw_image)

        if not text.strip() and image is None:
            raise CaptureRequestError('Missing "text" or "imageBase64"')

        return cls(project_path=project_path.strip(), text=text, image=image)

    @classmethod
    def from_body(cls, body: str | bytes | None) -> "CaptureRequest":
        if body is None or not body.strip():
            raise CaptureRequestError("Missing request body")
        try:
            data = json.loads(body)
        except (UnicodeDecodeError, ValueError) as exc:
            raise CaptureRequestError("Request body is not valid JSON") from exc
        if not isinstance(data, Mapping):
            raise CaptureRequestError("Request body must be a JSON object")
        return cls.from_mapping(data)


@dataclass(frozen=True, slots=True)
class CaptureResponse:
    success: bool
    filename: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": self.success}
        if self.filename is not None:
            body["filename"] = self.filename
        if self.error is not None:
            body["error"] = self.error
        return body


@dataclass(frozen=True, slots=True)
class CaptureResult:
    status_code: int
    response: CaptureResponse

    @property
    def body(self) -> dict[str, Any]:
        return self.response.to_dict()
