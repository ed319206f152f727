"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    AppConfig,
    AppConfigurationError,
    AudioSettings,
    LoggingSettings,
    OfflineSettings,
    UIServerSettings,
)
from offline.config import (
    CACHE_NAME,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_PATH_PREFIX,
    EXTERNAL_URLS,
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    _forbid_fixed_fields(_section(raw, "timer"), "timer", ("tick_interval_seconds",))
    return AppConfig(
        audio=_parse_audio_settings(_section(raw, "audio"), base_dir=base_dir),
        ui_server=_parse_ui_server_settings(_section(raw, "ui_server"), base_dir=base_dir),
        offline=_parse_offline_settings(_section(raw, "offline")),
        logging=_parse_logging_settings(_section(raw, "logging")),
        source_file=source_file,
    )


def _parse_audio_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> AudioSettings:
    enabled = _as_bool(section.get("enabled", False), "audio.enabled")
    audio_file = _resolve_path(base_dir, _as_str(section.get("file", ""), "audio.file"))
    if enabled and not audio_file:
        raise AppConfigurationError("audio.file is required when audio.enabled is true.")
    return AudioSettings(
        enabled=enabled,
        file=audio_file,
        output_device=(
            _as_int(section.get("output_device"), "audio.output_device")
            if "output_device" in section
            else None
        ),
    )


def _parse_ui_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> UIServerSettings:
    web_root = _as_str(section.get("web_root", ""), "ui_server.web_root")
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        web_root=_resolve_path(base_dir, web_root) if web_root else "",
    )


def _parse_offline_settings(section: Mapping[str, Any]) -> OfflineSettings:
    cache_name = _as_str(section.get("cache_name", CACHE_NAME), "offline.cache_name")
    if not cache_name:
        raise AppConfigurationError("offline.cache_name cannot be empty.")
    return OfflineSettings(
        cache_name=cache_name,
        origin=_as_str(section.get("origin", ""), "offline.origin"),
        path_prefix=(
            _as_str(section.get("path_prefix", DEFAULT_PATH_PREFIX), "offline.path_prefix")
            or DEFAULT_PATH_PREFIX
        ),
        external_urls=_as_str_tuple(
            section.get("external_urls", list(EXTERNAL_URLS)),
            "offline.external_urls",
        ),
        fallback_url=_as_str(section.get("fallback_url", ""), "offline.fallback_url"),
        fetch_timeout_seconds=_as_float(
            section.get("fetch_timeout_seconds", DEFAULT_FETCH_TIMEOUT_SECONDS),
            "offline.fetch_timeout_seconds",
        ),
        install_on_startup=_as_bool(
            section.get("install_on_startup", True),
            "offline.install_on_startup",
        ),
    )


def _parse_logging_settings(section: Mapping[str, Any]) -> LoggingSettings:
    level = _as_str(section.get("level", "INFO"), "logging.level").upper() or "INFO"
    if level not in _LOG_LEVELS:
        raise AppConfigurationError(
            f"logging.level must be one of: {', '.join(_LOG_LEVELS)}."
        )
    return LoggingSettings(level=level)


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_str_tuple(value: Any, field: str) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise AppConfigurationError(f"{field} must be a list of strings.")
    items = tuple(_as_str(item, field) for item in value)
    return tuple(item for item in items if item)


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)


def _forbid_fixed_fields(
    section: Mapping[str, Any],
    section_name: str,
    fields: tuple[str, ...],
) -> None:
    present = [field for field in fields if field in section]
    if present:
        joined = ", ".join(f"{section_name}.{field}" for field in present)
        raise AppConfigurationError(
            f"Not configurable: {joined}. The countdown always ticks once per second."
        )
