"""Helpers for loading runtime configuration profiles."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import ErrorCode, LineCountError
from .models import DEFAULT_CHUNK_SIZE, GlobalSettings, ProfileSettings, RuntimeConfig

DEFAULT_CONFIG_PATH = Path("config/defaults.json")
BUILTIN_SOURCE = Path("<builtin>")
DEFAULT_PROFILE = "default"
ALLOWED_ERROR_POLICIES = {"fail-fast", "skip"}
ALLOWED_EXECUTORS = {"thread", "process"}

# Mirrors config/defaults.json so every shipped profile works outside the repo root.
BUILTIN_DOCUMENT: Dict[str, Any] = {
    "version": 1,
    "global": {"error_policy": "fail-fast", "chunk_size": DEFAULT_CHUNK_SIZE},
    "profiles": {
        "default": {
            "description": "Thread pool sized by the executor; one task per file",
            "executor": "thread",
            "max_workers": None,
        },
        "bounded": {
            "description": "Thread pool capped at 8 workers for directories with very many files",
            "executor": "thread",
            "max_workers": 8,
        },
        "processes": {
            "description": "Process pool for CPU-heavy scans of large files",
            "executor": "process",
            "max_workers": None,
        },
    },
}


@dataclass(slots=True)
class ConfigDocument:
    source: Path
    version: int
    global_settings: GlobalSettings
    profiles: Dict[str, ProfileSettings]


def load_runtime_config(
    profile: str = DEFAULT_PROFILE,
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> RuntimeConfig:
    """Load configuration JSON, validate it, and resolve a specific profile.

    When no explicit path is given and ``config/defaults.json`` is absent from
    the working directory, the built-in copy of the shipped profiles is used.
    """

    document = load_config_document(
        profile_name=profile,
        config_path=config_path,
        overrides=overrides,
    )
    return RuntimeConfig(global_settings=document.global_settings, profile=document.profiles[profile])


def load_config_document(
    *,
    profile_name: Optional[str] = None,
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> ConfigDocument:
    if config_path is None and not DEFAULT_CONFIG_PATH.exists():
        return _build_document(BUILTIN_DOCUMENT, BUILTIN_SOURCE, profile_name, overrides)
    cfg_path = config_path or DEFAULT_CONFIG_PATH
    return _build_document(_read_config_json(cfg_path), cfg_path, profile_name, overrides)


# ---------------------------------------------------------------------------
# Internal helpers


def _build_document(
    raw: Any,
    cfg_path: Path,
    profile_name: Optional[str],
    overrides: Optional[Dict[str, Dict[str, Any]]],
) -> ConfigDocument:
    if not isinstance(raw, Mapping):
        raise LineCountError(ErrorCode.CONFIG_ERROR, f"Config file '{cfg_path}' must hold a JSON object")

    version = _require_positive_int(raw.get("version"), "version", cfg_path)
    global_section = raw.get("global", {})
    if not isinstance(global_section, Mapping):
        raise LineCountError(ErrorCode.CONFIG_ERROR, f"'global' section must be an object in {cfg_path}")

    overrides = overrides or {}
    global_data = {**global_section, **(overrides.get("global") or {})}
    global_settings = _build_global_settings(global_data, cfg_path)

    profiles_section = raw.get("profiles")
    if not isinstance(profiles_section, Mapping) or not profiles_section:
        raise LineCountError(ErrorCode.CONFIG_ERROR, f"'profiles' section missing in {cfg_path}")

    profile_overrides = overrides.get("profile") or {}
    profiles: Dict[str, ProfileSettings] = {}
    for name, profile_data in profiles_section.items():
        if not isinstance(profile_data, Mapping):
            raise LineCountError(
                ErrorCode.CONFIG_ERROR,
                f"Profile '{name}' must be an object in {cfg_path}",
            )
        merged = dict(profile_data)
        if profile_name and name == profile_name and profile_overrides:
            merged = {**merged, **profile_overrides}
        profiles[name] = _build_profile_settings(name, merged, cfg_path)

    if profile_name and profile_name not in profiles:
        raise LineCountError(
            ErrorCode.CONFIG_ERROR,
            f"Profile '{profile_name}' not found in {cfg_path}",
        )

    return ConfigDocument(
        source=cfg_path,
        version=version,
        global_settings=global_settings,
        profiles=profiles,
    )


def _read_config_json(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise LineCountError(ErrorCode.CONFIG_ERROR, f"Config file '{path}' not found") from exc
    except json.JSONDecodeError as exc:
        raise LineCountError(ErrorCode.CONFIG_ERROR, f"Config file '{path}' is not valid JSON: {exc}") from exc


def _build_global_settings(data: Mapping[str, Any], source: Path) -> GlobalSettings:
    error_policy = _normalize_error_policy(
        data.get("error_policy", GlobalSettings().error_policy),
        source,
    )
    chunk_size = _require_positive_int(
        data.get("chunk_size", GlobalSettings().chunk_size),
        "global.chunk_size",
        source,
    )
    return GlobalSettings(error_policy=error_policy, chunk_size=chunk_size)


def _build_profile_settings(name: str, data: Mapping[str, Any], source: Path) -> ProfileSettings:
    prefix = f"profiles.{name}"
    description = _require_string(
        data.get("description", ProfileSettings().description), f"{prefix}.description", source
    )
    executor = _require_string(data.get("executor", "thread"), f"{prefix}.executor", source).lower()
    if executor not in ALLOWED_EXECUTORS:
        allowed = ", ".join(sorted(ALLOWED_EXECUTORS))
        raise LineCountError(
            ErrorCode.CONFIG_ERROR,
            f"Unsupported executor '{executor}' for {prefix} in {source}. Allowed: {allowed}",
        )
    max_workers = _optional_positive_int(data.get("max_workers"), f"{prefix}.max_workers", source)
    return ProfileSettings(description=description, executor=executor, max_workers=max_workers)


def _normalize_error_policy(value: Any, source: Path) -> str:
    policy = _require_string(value, "global.error_policy", source).lower()
    if policy not in ALLOWED_ERROR_POLICIES:
        allowed = ", ".join(sorted(ALLOWED_ERROR_POLICIES))
        raise LineCountError(
            ErrorCode.CONFIG_ERROR,
            f"Unsupported error_policy '{value}' in {source}. Allowed: {allowed}",
        )
    return policy


def _require_string(value: Any, field: str, source: Path) -> str:
    if not isinstance(value, str):
        raise LineCountError(ErrorCode.CONFIG_ERROR, f"{field} must be a string in {source}")
    text = value.strip()
    if not text:
        raise LineCountError(ErrorCode.CONFIG_ERROR, f"{field} must be non-empty in {source}")
    return text


def _require_positive_int(value: Any, field: str, source: Path) -> int:
    if isinstance(value, bool):
        raise LineCountError(ErrorCode.CONFIG_ERROR, f"{field} must be an integer in {source}")
    try:
        num = int(value)
    except (TypeError, ValueError) as exc:
        raise LineCountError(
            ErrorCode.CONFIG_ERROR,
            f"{field} must be an integer in {source}",
        ) from exc
    if num <= 0:
        raise LineCountError(
            ErrorCode.CONFIG_ERROR,
            f"{field} must be greater than zero in {source}",
        )
    return num


def _optional_positive_int(value: Any, field: str, source: Path) -> Optional[int]:
    if value is None:
        return None
    return _require_positive_int(value, field, source)
