from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Iterable

try:
    import yaml
except ImportError as exc:  # pragma: no cover - import guard
    raise SystemExit(
        "PyYAML is required to load gmwrap configuration. Install it with `pip install pyyaml`."
    ) from exc

from gmwrap.options import Option, parse_option_spec

LOGGER = logging.getLogger("gmwrap.config")

DEFAULT_BINARY = "gm"
BINARY_ENV_VAR = "GMWRAP_BINARY"


@dataclass(frozen=True)
class Profile:
    name: str
    description: str
    options: tuple[Option, ...]


@dataclass(frozen=True)
class Settings:
    binary: str = DEFAULT_BINARY
    strict: bool = True
    check_exit_status: bool = False
    profiles: dict[str, Profile] = field(default_factory=dict)


def _parse_profiles(raw_profiles: Any) -> dict[str, Profile]:
    if not isinstance(raw_profiles, dict):
        raise ValueError("'profiles' must be a mapping of profile names.")
    profiles: dict[str, Profile] = {}
    for name, data in raw_profiles.items():
        if not isinstance(data, dict):
            raise ValueError(f"Profile '{name}' must be a mapping.")
        description = str(data.get("description", ""))
        raw_options = data.get("options", [])
        if isinstance(raw_options, (str, bytes)) or not isinstance(raw_options, Iterable):
            raise ValueError(f"Profile '{name}' must define iterable 'options'.")
        options = tuple(parse_option_spec(str(spec)) for spec in raw_options)
        profiles[str(name)] = Profile(name=str(name), description=description, options=options)
    return profiles


def _flag(raw: dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be true or false, got {value!r}.")
    return value


def load_config(config_path: Path | None = None, *, binary: str | None = None) -> Settings:
    """Load settings from a YAML file, then apply environment and explicit overrides."""
    settings = Settings()
    if config_path is not None and config_path.is_file():
        with config_path.open("r", encoding="utf-8") as stream:
            try:
                raw = yaml.safe_load(stream) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"Configuration {config_path} is not valid YAML: {exc}") from exc
        if not isinstance(raw, dict):
            raise ValueError("Configuration must be a mapping.")
        settings = Settings(
            binary=str(raw.get("binary", DEFAULT_BINARY)),
            strict=_flag(raw, "strict", True),
            check_exit_status=_flag(raw, "check_exit_status", False),
            profiles=_parse_profiles(raw.get("profiles", {})),
        )
    elif config_path is not None:
        LOGGER.debug(
            "Configuration file not found, using defaults",
            extra={"structured_data": {"config": str(config_path)}},
        )
    if env_binary := os.environ.get(BINARY_ENV_VAR):
        settings = replace(settings, binary=env_binary)
    if binary:
        settings = replace(settings, binary=binary)
    return settings


def resolve_binary(settings: Settings) -> str:
    """Return the binary's path on PATH, or the bare name when it is not found."""
    return shutil.which(settings.binary) or settings.binary


def resolve_profile(name: str, settings: Settings) -> Profile:
    """Resolve a profile name to a concrete ``Profile`` instance."""
    try:
        return settings.profiles[name]
    except KeyError as exc:
        raise KeyError(
            f"Unknown profile '{name}'. Available profiles: {', '.join(sorted(settings.profiles))}"
        ) from exc
