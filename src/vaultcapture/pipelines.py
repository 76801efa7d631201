"""pipelines"""

import base64
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from vaultcapture import config
from vaultcapture.errors import CaptureRequestError, NoteValidationError
from vaultcapture.logging import get_logger
from vaultcapture.services import CaptureHandler, CaptureRequest
from vaultcapture.validation import validate_markdown


def _load_settings(cli_options: Mapping[str, Any] | None) -> config.AppSettings:
    return config.load_settings(cli_options or {})


def run_validate(cli_options: Mapping[str, Any] | None = None) -> int:
    """
    Validate command: check note files against the vault format.
    """
    cli_options = dict(cli_options or {})
    paths = [Path(str(path)).expanduser() for path in cli_options.get("paths") or []]
    failures = 0
    for path in paths:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            print(f"{path}: cannot read file ({exc.strerror or exc})")
            failures += 1
            continue
        try:
            validate_markdown(text)
        except NoteValidationError as exc:
            print(f"{path}: {exc}")
            failures += 1
        else:
            print(f"{path}: OK")
    if len(paths) > 1:
        print(f"{len(paths) - failures}/{len(paths)} notes valid")
    return 1 if failures else 0


def run_capture(cli_options: Mapping[str, Any] | None = None) -> int:
    """
    Capture command: run one capture through the same handler as the API.
    """
    cli_options = dict(cli_options or {})
    settings = _load_settings(cli_options)
    get_logger("vaultcapture", settings.verbose)

    body: dict[str, Any] = {
        "projectPath": cli_options.get("project_path") or "",
        "text": cli_options.get("text") or "",
    }
    image_path = cli_options.get("image_path")
    if image_path:
        try:
            image_bytes = Path(str(image_path)).expanduser().read_bytes()
        except OSError as exc:
            raise CaptureRequestError(f"Cannot read image {image_path}: {exc}") from exc
        body["imageBase64"] = base64.b64encode(image_bytes).decode("ascii")

    handler = CaptureHandler(settings)
    try:
        if cli_options.get("dry_run"):
            result = handler.build_note(CaptureRequest.from_mapping(body))
            print(f"# {settings.note_path(result.filename)}")
            print(result.markdown)
            return 0
        outcome = handler.handle(json.dumps(body))
    finally:
        handler.close()
    print(json.dumps(outcome.body, ensure_ascii=False))
    return 0 if outcome.response.success else 1


def run_serve(cli_options: Mapping[str, Any] | None = None) -> int:
    from vaultcapture.api import run_server

    settings = _load_settings(cli_options)
    logger = get_logger("vaultcapture.api", settings.verbose)
    logger.info("Listening on http://%s:%s", settings.host, settings.port)
    run_server(settings)
    return 0


def run_init(cli_options: Mapping[str, Any] | None = None) -> int:
    logger = get_logger("vaultcapture.init", False)
    init_result = config.initialize_config(cli_options)
    if init_result.config_created:
        logger.info("Config created at %s", init_result.config_path)
    elif init_result.config_updated_keys:
        logger.info(
            "Config updated at %s (added: %s)",
            init_result.config_path,
            ", ".join(init_result.config_updated_keys),
        )
    else:
        logger.info("Config already exists at %s", init_result.config_path)
    return 0


def run_config_set(cli_options: Mapping[str, Any] | None = None) -> int:
    logger = get_logger("vaultcapture.config", False)
    cli_options = dict(cli_options or {})
    key = str(cli_options.pop("setting_key"))
    value = config.parse_setting_value(key, str(cli_options.pop("setting_value")))
    config_path = config.resolve_config_path(cli_options)

    changed = config.update_config_value(config_path, key, value)
    shown = config.mask_secret(str(value)) if key in config.SECRET_SETTINGS else value
    if changed:
        logger.info("Config updated at %s: %s = %s", config_path, key, shown)
    else:
        logger.info("Config already has %s = %s", key, shown)
    return 0


def run_config_show(cli_options: Mapping[str, Any] | None = None) -> int:
    settings = config.get_config_with_sources(cli_options or {})
    print("Effective configuration:")
    for key in sorted(settings):
        value, source = settings[key]
        if key in config.SECRET_SETTINGS and value:
            value = config.mask_secret(str(value))
        rendered = json.dumps(value, ensure_ascii=False)
        suffix = f"  ({source})" if source != "file" else ""
        print(f"  {key} = {rendered}{suffix}")
    return 0
