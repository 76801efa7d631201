"""LLM client abstractions with OpenAI and Gemini implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

import httpx

from vaultcapture.errors import LLMAPIError, LLMClientError
from vaultcapture.llm import prompts
from vaultcapture.llm.prompts import NOTE_JSON_SCHEMA
from vaultcapture.logging import get_logger
from vaultcapture.note.types import ResponseFormat

from .types import (
    ImageAttachment,
    LLMCaptureContext,
    LLMCaptureResult,
    LLMClientConfig,
)

_NO_TEXT = "(no text provided)"


def _api_error(provider: str, exc: httpx.HTTPStatusError) -> LLMAPIError:
    status_code = exc.response.status_code
    message = f"{provider} API error ({status_code})"
    try:
        data = exc.response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            detail = str(error.get("message") or "").strip()
            status = str(error.get("status") or error.get("type") or "").strip()
            code = error.get("code")
            code_text = str(code).strip() if code is not None else ""
            parts = [item for item in (code_text, status) if item]
            label = " ".join(parts)
            if detail:
                if label:
                    message = f"{provider} API error ({label}): {detail}"
                else:
                    message = f"{provider} API error: {detail}"
            elif label:
                message = f"{provider} API error ({label})"
    elif exc.response.text:
        message = f"{provider} API error ({status_code}): {exc.response.text}"
    return LLMAPIError(message)


# --- LLM client base. ---
class BaseLLMClient(ABC):
    _provider_label = "LLM"

    def __init__(self, config: LLMClientConfig, system_prompt: str = ""):
        self._config = config
        self._system_prompt = system_prompt or prompts.SYSTEM_PROMPT_V1
        self._logger = get_logger("vaultcapture.llm")

    @abstractmethod
    def _close(self):
        """Close client."""
        raise NotImplementedError

    @abstractmethod
    def _chat_completion(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float,
        max_tokens: int,
        response_format: ResponseFormat,
        image: ImageAttachment | None = None,
    ) -> tuple[str, dict[str, Any]]:
        """Call LLM chat completion"""
        raise NotImplementedError

    def _format_prompt_messages(
        self,
        template: Mapping[str, str],
        **variables: Any,
    ) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        if (system_prompt := template.get("system")) is not None:
            messages.append(
                {"role": "system", "content": system_prompt.format(**variables)}
            )
        if (user_prompt := template.get("user")) is not None:
            messages.append(
                {"role": "user", "content": user_prompt.format(**variables)}
            )
        return messages

    def _post(self, http_client: Any, url: str, payload: dict[str, Any]) -> Any:
        try:
            response = http_client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise _api_error(self._provider_label, exc) from exc
        except httpx.HTTPError as exc:
            raise LLMAPIError(
                f"{self._provider_label} request failed: {exc}"
            ) from exc
        return response.json()

    def generate_note(self, context: LLMCaptureContext) -> LLMCaptureResult:
        """Ask the model to restructure a capture into a note."""
        if not isinstance(context, LLMCaptureContext):
            raise LLMClientError("LLMCaptureContext instance is required")

        self._logger.debug(
            "Generating note via %s (format=%s, image=%s)",
            type(self).__name__,
            context.response_format.value,
            context.image is not None,
        )
        template = prompts.get_prompt(f"capture_{context.response_format.value}")
        messages = self._format_prompt_messages(
            template,
            system_prompt=self._system_prompt,
            project_path=context.project_path or "(none)",
            text=context.text.strip() or _NO_TEXT,
        )
        content, raw_response = self._chat_completion(
            messages,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
            response_format=context.response_format,
            image=context.image,
        )
        if not content:
            self._logger.warning("%s returned an empty note", type(self).__name__)
        return LLMCaptureResult(content=content, raw_response=raw_response)

    def close(self):
        """Close LLM client."""
        self._close()


# --- LLM clients.---
class OpenAILLMClient(BaseLLMClient):
    """OpenAI chat-completions backed implementation."""

    _provider_label = "OpenAI"

    def __init__(self, config: LLMClientConfig, system_prompt: str = ""):
        super().__init__(config, system_prompt)
        base_url = (config.base_url or "https://api.openai.com/v1").rstrip("/")
        self._http_client = httpx.Client(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
            },
            timeout=config.timeout,
        )

    def _close(self):
        """Implementation of BaseLLMClient._close()"""
        self._http_client.close()

    def _chat_completion(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float,
        max_tokens: int,
        response_format: ResponseFormat,
        image: ImageAttachment | None = None,
    ) -> tuple[str, dict[str, Any]]:
        """
        Implementation of BaseLLMClient._chat_completion()

        Send a completion request and return a response.
        """
        payload_messages: list[dict[str, Any]] = []
        for message in messages:
            if image is not None and message["role"] == "user":
                payload_messages.append(
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": message["content"]},
                            {
                                "type": "image_url",
                                "image_url": {"url": image.to_data_url()},
                            },
                        ],
                    }
                )
            else:
                payload_messages.append(dict(message))

        payload: dict[str, Any] = {
            "model": self._config.model,
            "messages": payload_messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format is ResponseFormat.STRUCTURED:
            payload["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": "note",
                    "strict": True,
                    "schema": NOTE_JSON_SCHEMA,
                },
            }

        data = self._post(self._http_client, "/chat/completions", payload)
        content: str = ""
        try:
            content = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            self._logger.debug("OpenAI response missing content field")
        return content.strip(), data


class GeminiLLMClient(BaseLLMClient):
    """Google Gemini-backed implementation."""

    _provider_label = "Gemini"

    def __init__(self, config: LLMClientConfig, system_prompt: str = ""):
        super().__init__(config, system_prompt)
        base_url = (
            config.base_url or "https://generativelanguage.googleapis.com/v1beta"
        ).rstrip("/")
        self._http_client = httpx.Client(
            base_url=base_url,
            headers={
                "x-goog-api-key": config.api_key,
                "Content-Type": "application/json",
            },
            timeout=config.timeout,
        )

    def _close(self):
        """Implementation of BaseLLMClient._close()"""
        self._http_client.close()

    def _chat_completion(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float,
        max_tokens: int,
        response_format: ResponseFormat,
        image: ImageAttachment | None = None,
    ) -> tuple[str, dict[str, Any]]:
        system_texts: list[str] = []
        contents: list[dict[str, Any]] = []
        for message in messages:
            role = message.get("role")
            content = message.get("content", "")
            if role == "system":
                if content.strip():
                    system_texts.append(content)
                continue
            gemini_role = "model" if role == "assistant" else "user"
            parts: list[dict[str, Any]] = [{"text": content}]
            if image is not None and gemini_role == "user":
                parts.append(
                    {"inline_data": {"mime_type": image.mime_type, "data": image.data}}
                )
            contents.append({"role": gemini_role, "parts": parts})

        generation_config: dict[str, Any] = {
            "temperature": temperature,
            "maxOutputTokens": max_tokens,
        }
        if response_format is ResponseFormat.STRUCTURED:
            generation_config["responseMimeType"] = "application/json"
        payload: dict[str, Any] = {
            "contents": contents,
            "generationConfig": generation_config,
        }
        if system_texts:
            payload["system_instruction"] = {
                "parts": [{"text": "\n".join(system_texts)}]
            }

        # NOTE: REST API
        # https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent
        data = self._post(
            self._http_client,
            f"/models/{self._config.model}:generateContent",
            payload,
        )
        content: str = ""
        try:
            parts = data["candidates"][0]["content"]["parts"]
            if isinstance(parts, list):
                content = "".join(
                    part.get("text", "") for part in parts if isinstance(part, dict)
                )
        except (KeyError, IndexError, TypeError):
            self._logger.debug("Gemini response missing content field")
        return content.strip(), data


_CLIENTS: dict[str, type[BaseLLMClient]] = {
    "openai": OpenAILLMClient,
    "gemini": GeminiLLMClient,
}


def create_llm_client(
    settings: Mapping[str, object], system_prompt: str = ""
) -> BaseLLMClient:
    """Build the client for ``llm_provider``; unknown providers fail in the config."""
    config = LLMClientConfig.from_settings(settings)
    return _CLIENTS[config.provider](config, system_prompt)
