"""Configuration loading utilities for vaultcapture."""

from __future__ import annotations

import os
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from vaultcapture.errors import ConfigError
from vaultcapture.llm.prompts import SYSTEM_PROMPT_V1
from vaultcapture.note.types import ResponseFormat

_ENV_PREFIX = "VAULTCAPTURE_"
_DEFAULT_CONFIG = Path("~/.vaultcapture/config.toml").expanduser()

_DEFAULT_SETTINGS: dict[str, Any] = {
    "github_owner": "",
    "github_repo": "",
    "github_token": "",
    "github_branch": "main",
    "github_api_url": "https://api.github.com",
    "notes_path": "00_Inbox",
    "llm_provider": "openai",
    "llm_api_key": "",
    "llm_model": "",
    "llm_base_url": "",
    "llm_timeout": 60.0,
    "llm_temperature": 0.2,
    "llm_max_tokens": 2000,
    "response_format": "structured",
    "system_prompt_path": "",
    "cors_origins": "*",
    "host": "127.0.0.1",
    "port": 8000,
    "verbose_logging": False,
}

REQUIRED_SETTINGS: tuple[str, ...] = (
    "github_owner",
    "github_repo",
    "github_token",
    "llm_api_key",
)
SECRET_SETTINGS: frozenset[str] = frozenset({"github_token", "llm_api_key"})


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    escaped = (
        str(value)
        .replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def _build_default_config_template(settings: Mapping[str, Any]) -> str:
    return "\n".join(
        [
            "# vaultcapture configuration",
            "#",
            "# Secrets can also be exported as VAULTCAPTURE_GITHUB_TOKEN and "
            "VAULTCAPTURE_LLM_API_KEY.",
            "",
            "# Vault repository",
            f"github_owner = {_render_value(settings['github_owner'])}",
            f"github_repo = {_render_value(settings['github_repo'])}",
            f"github_token = {_render_value(settings['github_token'])}",
            f"github_branch = {_render_value(settings['github_branch'])}",
            f"notes_path = {_render_value(settings['notes_path'])}",
            "",
            "# AI integration",
            f"llm_provider = {_render_value(settings['llm_provider'])}",
            f"llm_api_key = {_render_value(settings['llm_api_key'])}",
            f"llm_model = {_render_value(settings['llm_model'])}",
            f"response_format = {_render_value(settings['response_format'])}",
            f"system_prompt_path = {_render_value(settings['system_prompt_path'])}",
            "",
            "# HTTP server",
            f"host = {_render_value(settings['host'])}",
            f"port = {_render_value(settings['port'])}",
            f"cors_origins = {_render_value(settings['cors_origins'])}",
            "",
        ]
    )


_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _coerce_env_value(key: str, value: str) -> Any:
    default = _DEFAULT_SETTINGS.get(key)
    if isinstance(default, bool):
        return value.strip().lower() in _TRUE_VALUES
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            return default
    if isinstance(default, float):
        try:
            return float(value)
        except ValueError:
            return default
    return value


def parse_setting_value(key: str, value: str) -> Any:
    """Convert a command-line string to the type of the setting's default.

    Unlike environment values, bad input is an error rather than a fallback.
    """
    if key not in _DEFAULT_SETTINGS:
        raise ConfigError(
            f"Unknown setting: {key}",
            hint="Run `vaultcapture config show` to list settings.",
        )
    default = _DEFAULT_SETTINGS[key]
    text = value.strip()
    if isinstance(default, bool):
        if text.lower() in _TRUE_VALUES:
            return True
        if text.lower() in _FALSE_VALUES:
            return False
        raise ConfigError(
            f"Invalid value for {key}: {value!r}", hint="Use true or false."
        )
    if isinstance(default, (int, float)):
        try:
            return type(default)(text)
        except ValueError as exc:
            raise ConfigError(
                f"Invalid value for {key}: {value!r}",
                hint=f"Use a number such as {default}.",
            ) from exc
    return value


def resolve_config_path(cli_options: Mapping[str, Any] | None) -> Path:
    cli_options = dict(cli_options or {})
    raw_config_path = cli_options.get("config_path")
    return Path(raw_config_path).expanduser() if raw_config_path else _DEFAULT_CONFIG


def update_config_value(config_path: Path, key: str, value: Any) -> bool:
    """Write ``key = value`` into the config file; return False if unchanged."""
    rendered = f"{key} = {_render_value(value)}"
    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(rendered + "\n", encoding="utf-8")
        return True

    text = config_path.read_text(encoding="utf-8")
    pattern = re.compile(rf"^\s*{re.escape(key)}\s*=")
    lines = text.split("\n")
    for idx, line in enumerate(lines):
        if pattern.match(line):
            if line.strip() == rendered:
                return False
            lines[idx] = rendered
            config_path.write_text("\n".join(lines), encoding="utf-8")
            return True

    updated = text.rstrip("\n") + "\n" + rendered + "\n"
    config_path.write_text(updated, encoding="utf-8")
    return True


def _load_file_config(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(
            f"Failed to read config file {path}: {exc}",
            hint="Fix the TOML syntax or run `vaultcapture init` on a new path.",
        ) from exc


def _load_env_config() -> dict[str, Any]:
    config: dict[str, Any] = {}
    for env_key, raw_value in os.environ.items():
        if env_key.startswith(_ENV_PREFIX):
            normalized = env_key[len(_ENV_PREFIX) :].lower()
            config[normalized] = _coerce_env_value(normalized, raw_value)
    return config


def get_config_with_sources(
    cli_options: Mapping[str, Any] | None = None,
) -> dict[str, tuple[Any, str]]:
    """Return every effective setting with the layer it came from."""
    cli_options = dict(cli_options or {})
    config_path = resolve_config_path(cli_options)

    layers: list[tuple[str, Mapping[str, Any]]] = [
        ("default", _DEFAULT_SETTINGS),
        ("file", _load_file_config(config_path)),
        ("env", _load_env_config()),
        (
            "cli",
            {
                key: value
                for key, value in cli_options.items()
                if value is not None and key != "config_path"
            },
        ),
    ]
    merged: dict[str, tuple[Any, str]] = {}
    for source, values in layers:
        for key, value in values.items():
            merged[key] = (value, source)
    path_source = "cli" if cli_options.get("config_path") else "default"
    merged["config_path"] = (str(config_path), path_source)
    return merged


def get_config(cli_options: Mapping[str, Any] | None = None) -> dict[str, Any]:
    merged = get_config_with_sources(cli_options)
    return {key: value for key, (value, _source) in merged.items()}


def mask_secret(value: str) -> str:
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}...{value[-4:]}"


@dataclass(slots=True)
class InitResult:
    config_path: Path
    config_created: bool
    config_updated_keys: list[str]


def initialize_config(cli_options: Mapping[str, Any] | None = None) -> InitResult:
    config_path = resolve_config_path(cli_options)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    cli_options = dict(cli_options or {})
    init_settings = dict(_DEFAULT_SETTINGS)
    for key, value in cli_options.items():
        if key in init_settings and value is not None:
            init_settings[key] = value

    config_created = False
    config_updated_keys: list[str] = []
    if not config_path.exists():
        config_path.write_text(
            _build_default_config_template(init_settings), encoding="utf-8"
        )
        config_created = True
    else:
        existing_keys = set(_load_file_config(config_path))
        missing_keys = [key for key in _DEFAULT_SETTINGS if key not in existing_keys]
        if missing_keys:
            config_updated_keys = list(missing_keys)
            with config_path.open("a", encoding="utf-8") as handle:
                handle.write(
                    "\n# Added by vaultcapture init to ensure required defaults.\n"
                )
                for key in missing_keys:
                    handle.write(f"{key} = {_render_value(init_settings[key])}\n")

    return InitResult(
        config_path=config_path.resolve(),
        config_created=config_created,
        config_updated_keys=config_updated_keys,
    )


# --- Settings value passed to the handler and the app. ---
def _load_system_prompt(raw_path: object) -> str:
    path_text = str(raw_path or "").strip()
    if not path_text:
        return SYSTEM_PROMPT_V1
    path = Path(path_text).expanduser()
    try:
        prompt = path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ConfigError(
            f"Cannot read system prompt file {path}: {exc}",
            hint="Fix `system_prompt_path` or leave it empty for the built-in prompt.",
        ) from exc
    if not prompt:
        raise ConfigError(f"System prompt file {path} is empty")
    return prompt


def _split_origins(value: object) -> tuple[str, ...]:
    if isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        items = str(value or "").split(",")
    return tuple(item.strip() for item in items if item.strip())


@dataclass(frozen=True, slots=True)
class AppSettings:
    """Immutable settings built once at startup and shared by reference."""

    values: Mapping[str, Any] = field(default_factory=dict)
    notes_path: str = "00_Inbox"
    response_format: ResponseFormat = ResponseFormat.STRUCTURED
    system_prompt: str = SYSTEM_PROMPT_V1
    cors_origins: tuple[str, ...] = ("*",)
    host: str = "127.0.0.1"
    port: int = 8000
    verbose: bool = False

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> AppSettings:
        values = dict(_DEFAULT_SETTINGS)
        values.update(settings)
        try:
            port = int(values.get("port") or 8000)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid port: {values.get('port')!r}") from exc
        return cls(
            values=values,
            notes_path=str(values.get("notes_path") or "").strip().strip("/"),
            response_format=ResponseFormat.from_value(
                str(values.get("response_format") or "")
            ),
            system_prompt=_load_system_prompt(values.get("system_prompt_path")),
            cors_origins=_split_origins(values.get("cors_origins")),
            host=str(values.get("host") or "127.0.0.1"),
            port=port,
            verbose=bool(values.get("verbose_logging", False)),
        )

    def missing_settings(self) -> list[str]:
        return [
            key
            for key in REQUIRED_SETTINGS
            if not str(self.values.get(key) or "").strip()
        ]

    def note_path(self, filename: str) -> str:
        return "/".join(part for part in (self.notes_path, filename) if part)


def load_settings(cli_options: Mapping[str, Any] | None = None) -> AppSettings:
    return AppSettings.from_settings(get_config(cli_options))
