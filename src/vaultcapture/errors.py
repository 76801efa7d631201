from __future__ import annotations

from collections.abc import Sequence


class VaultCaptureError(Exception):
    """Base exception for all vaultcapture errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigError(VaultCaptureError):
    """Raised when config is missing or invalid."""


class MissingSettingError(ConfigError):
    """Raised when a required configuration value is absent."""

    def __init__(self, setting_name: str, message: str | None = None) -> None:
        detail = message or f"Missing required setting: {setting_name}"
        super().__init__(
            detail,
            hint=f"Set `{setting_name}` in the config file or export "
            f"VAULTCAPTURE_{setting_name.upper()}.",
        )
        self.setting_name = setting_name


class CaptureRequestError(VaultCaptureError):
    """Raised when a capture request body cannot be used."""


# --- Note validation. ---
class NoteValidationError(VaultCaptureError):
    """Base error for notes that do not conform to the vault format."""


class MissingFrontmatterError(NoteValidationError):
    def __init__(self) -> None:
        super().__init__(
            "Missing YAML frontmatter: Document must start with --- delimiters"
        )


class MalformedYamlError(NoteValidationError):
    def __init__(self, line_number: int, line: str, reason: str = "") -> None:
        if reason:
            message = f"Invalid YAML at line {line_number}: {reason}"
        else:
            message = f'Invalid YAML syntax at line {line_number}: "{line}"'
        super().__init__(message)
        self.line_number = line_number
        self.line = line


class MissingFieldError(NoteValidationError):
    def __init__(self, field_name: str) -> None:
        super().__init__(f"Missing required field: {field_name}")
        self.field_name = field_name


class InvalidTypeError(NoteValidationError):
    """Raised when the `type` field is not an allowed note type."""


class InvalidSourceFormatError(NoteValidationError):
    """Raised when the `source` field is not a wikilink."""


class InvalidTagsError(NoteValidationError):
    def __init__(
        self,
        tags: Sequence[str],
        allowed: Sequence[str] = (),
        message: str | None = None,
    ) -> None:
        if message is None:
            message = f"Invalid tags: {', '.join(tags)}."
            if allowed:
                message += f" Allowed: {', '.join(allowed)}"
        super().__init__(message)
        self.tags = tuple(tags)


class MissingStatusTagError(NoteValidationError):
    """Raised when no status tag is present."""


class InvalidStructuredNoteError(NoteValidationError):
    """Raised when the model's JSON does not match the structured note shape."""


# --- External services. ---
class LLMClientError(VaultCaptureError):
    """Base error for LLM client failures."""


class LLMConfigError(LLMClientError, ConfigError):
    """Raised when the LLM client cannot be configured."""


class LLMAPIError(LLMClientError):
    """Raised when the HTTP API call fails."""


class GitHubError(VaultCaptureError):
    """Base error for GitHub failures."""


class GitHubAPIError(GitHubError):
    """Raised when the GitHub API rejects a request."""
