"""Configuration loading for notesift.

Settings come from a TOML file:

    directory = "~/notes"
    extensions = ["org", "txt"]
    mode = "incremental"        # or "regex"
    ignore = ["draft-*"]
    debounce_seconds = 0.5

The file is `--config` if given, else `$XDG_CONFIG_HOME/notesift/config.toml`
when it exists. `NOTESIFT_DIR` overrides `directory`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .models import SearchMode

DEFAULT_DIRECTORY = Path.home() / "notes"
DEFAULT_CONFIG_HOME = Path.home() / ".config"


class ConfigError(ValueError):
    """Raised for unreadable or invalid configuration."""


@dataclass(frozen=True)
class BrowserConfig:
    directory: Path = DEFAULT_DIRECTORY
    extensions: tuple[str, ...] = ("org",)
    mode: SearchMode = SearchMode.INCREMENTAL
    ignore: tuple[str, ...] = ()
    debounce_seconds: float = 0.5

    def with_directory(self, directory: Path) -> "BrowserConfig":
        return replace(self, directory=Path(directory).expanduser())


def get_config_path() -> Path:
    """Default config file location (XDG_CONFIG_HOME/notesift/config.toml)."""
    base = Path(os.environ.get("XDG_CONFIG_HOME", DEFAULT_CONFIG_HOME))
    return base / "notesift" / "config.toml"


def _coerce_str_list(value: Any, key: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ConfigError(f"{key} must be a string or a list of strings")


def parse_config(data: dict[str, Any]) -> BrowserConfig:
    """Build a BrowserConfig from already-decoded TOML data."""
    config = BrowserConfig()
    changes: dict[str, Any] = {}

    if "directory" in data:
        if not isinstance(data["directory"], str) or not data["directory"].strip():
            raise ConfigError("directory must be a non-empty string")
        changes["directory"] = Path(data["directory"]).expanduser()

    if "extensions" in data:
        extensions = tuple(e.strip().lstrip(".") for e in _coerce_str_list(data["extensions"], "extensions"))
        if not any(extensions):
            raise ConfigError("extensions must not be empty")
        changes["extensions"] = tuple(e for e in extensions if e)

    if "mode" in data:
        try:
            changes["mode"] = SearchMode(str(data["mode"]).strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in SearchMode)
            raise ConfigError(f"mode must be one of: {choices}") from None

    if "ignore" in data:
        changes["ignore"] = _coerce_str_list(data["ignore"], "ignore")

    if "debounce_seconds" in data:
        value = data["debounce_seconds"]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ConfigError("debounce_seconds must be a non-negative number")
        changes["debounce_seconds"] = float(value)

    return replace(config, **changes)


def load_config(path: Path | None = None) -> BrowserConfig:
    """Load configuration, falling back to defaults when no file exists.

    An explicitly given `path` must exist.
    """
    import tomllib

    if path is None:
        candidate = get_config_path()
        path = candidate if candidate.is_file() else None
    elif not Path(path).is_file():
        raise ConfigError(f"Config file not found: {path}")

    data: dict[str, Any] = {}
    if path is not None:
        try:
            data = tomllib.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e

    config = parse_config(data)

    if env_dir := os.environ.get("NOTESIFT_DIR"):
        config = config.with_directory(Path(env_dir))

    return config
