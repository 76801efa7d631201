"""Shared types for LLM integrations."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Any, Literal, Mapping

from vaultcapture.errors import CaptureRequestError, LLMConfigError
from vaultcapture.note.types import ResponseFormat

ChatRole = Literal["system", "user", "assistant"]


LLM_PROVIDER_DEFAULTS: dict[str, dict[str, str]] = {
    "openai": {
        "model": "gpt-4o",
        "base_url": "https://api.openai.com/v1",
    },
    "gemini": {
        "model": "gemini-2.5-flash",
        "base_url": "https://generativelanguage.googleapis.com/v1beta",
    },
}


def _get_float(settings: Mapping[str, object], key: str, default: float) -> float:
    value = settings.get(key, default)
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return default
    return default


# --- Config. ---
@dataclass(frozen=True, slots=True)
class LLMClientConfig:
    provider: str
    base_url: str
    api_key: str
    model: str
    timeout: float
    temperature: float = 0.2
    max_tokens: int = 2000

    @classmethod
    def from_settings(cls, settings: Mapping[str, object]) -> LLMClientConfig:
        provider = str(settings.get("llm_provider") or "").strip().lower()
        if not provider:
            raise LLMConfigError(
                "`llm_provider` must be configured before using the LLM client.",
                hint='Set `llm_provider = "openai"` in the config file.',
            )
        if provider not in LLM_PROVIDER_DEFAULTS:
            raise LLMConfigError(
                f"Unsupported LLM provider: {provider}.",
                hint=f"Use one of: {', '.join(LLM_PROVIDER_DEFAULTS)}.",
            )

        api_key = str(settings.get("llm_api_key") or "").strip()
        if not api_key:
            raise LLMConfigError(
                "`llm_api_key` must be configured before using the LLM client.",
                hint="Set `llm_api_key` in the config file or export "
                "VAULTCAPTURE_LLM_API_KEY.",
            )

        defaults = LLM_PROVIDER_DEFAULTS[provider]
        base_url = str(settings.get("llm_base_url") or defaults["base_url"])
        model = str(settings.get("llm_model") or defaults["model"])
        max_tokens = int(_get_float(settings, "llm_max_tokens", 2000))

        return cls(
            provider=provider,
            base_url=base_url,
            api_key=api_key,
            model=model,
            timeout=_get_float(settings, "llm_timeout", 60.0),
            temperature=_get_float(settings, "llm_temperature", 0.2),
            max_tokens=max_tokens,
        )


# --- Context. ---
_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.S)


@dataclass(frozen=True, slots=True)
class ImageAttachment:
    """Base64 image sent alongside the capture text for OCR."""

    mime_type: str
    data: str

    @classmethod
    def from_base64(cls, value: str) -> ImageAttachment:
        value = value.strip()
        mime_type = "image/jpeg"
        data = value
        if match := _DATA_URL.match(value):
            mime_type = match.group("mime")
            data = match.group("data")
        data = "".join(data.split())
        if not data:
            raise CaptureRequestError("Invalid imageBase64: empty image payload")
        try:
            base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise CaptureRequestError(
                "Invalid imageBase64: not a base64 payload"
            ) from exc
        return cls(mime_type=mime_type, data=data)

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True, slots=True)
class LLMCaptureContext:
    """Minimal context required to turn a capture into a note."""

    text: str = ""
    project_path: str = ""
    image: ImageAttachment | None = None
    response_format: ResponseFormat = ResponseFormat.STRUCTURED


# --- Result classes. ---
@dataclass(frozen=True, slots=True)
class LLMCaptureResult:
    content: str = ""
    raw_response: dict[str, Any] | None = None
