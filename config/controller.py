"""Configuration controller for YAML-based settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


@dataclass(frozen=True)
class ConfigPaths:
    """Filesystem paths for configuration files."""

    config_dir: Path
    config_file: Path
    override_file: Path


def parse_bool(value: Any) -> bool:
    """Interpret a config flag, accepting booleans, 0/1 and YAML-style strings."""

    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"Expected a boolean flag, got {value!r}")


def read_yaml_mapping(path: Path) -> dict[str, Any]:
    """Load a YAML file whose top level must be a mapping (empty file -> {})."""

    with path.open("r", encoding="utf-8") as file:
        data = yaml.safe_load(file) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge dictionaries, overriding base values with override values."""

    merged = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def normalize_config(config: dict[str, Any]) -> dict[str, Any]:
    """Normalize config, filling in focus probe and logging defaults."""

    normalized = dict(config)
    health_cfg = dict(normalized.get("health") or {})
    focus_cfg = dict(health_cfg.get("focus") or {})

    focus_cfg["namespace_tag"] = str(focus_cfg.get("namespace_tag", "focus-health"))
    retries = focus_cfg.get("max_collision_retries", 100)
    focus_cfg["max_collision_retries"] = None if retries is None else int(retries)
    focus_cfg["conference_log_level"] = str(
        focus_cfg.get("conference_log_level", "warning")
    ).lower()
    focus_cfg["include_in_statistics"] = parse_bool(focus_cfg.get("include_in_statistics", False))

    logging_cfg = dict(normalized.get("logging") or {})
    logging_cfg["level"] = str(logging_cfg.get("level", "info")).lower()
    log_file = logging_cfg.get("file")
    logging_cfg["file"] = str(log_file) if log_file else None

    health_cfg["focus"] = focus_cfg
    normalized["health"] = health_cfg
    normalized["logging"] = logging_cfg
    return normalized


def read_config_files(paths: ConfigPaths) -> dict[str, Any]:
    """Read the default file and merge the override file if present."""

    config = read_yaml_mapping(paths.config_file)
    if paths.override_file.exists():
        override_config = read_yaml_mapping(paths.override_file)
        if override_config:
            config = deep_merge(config, override_config)
    return config


def load_config_files(paths: ConfigPaths) -> dict[str, Any]:
    """Read, merge and normalize the configuration files."""

    return normalize_config(read_config_files(paths))


def config_paths(config_dir: Path, config_file: str = "default.yaml") -> ConfigPaths:
    return ConfigPaths(
        config_dir=config_dir,
        config_file=config_dir / config_file,
        override_file=config_dir / "override.yaml",
    )


class ConfigController:
    """Singleton controller for loading and updating configuration."""

    _instance: "ConfigController | None" = None

    def __init__(self, config_file: str = "default.yaml", config_dir: Path | None = None) -> None:
        if ConfigController._instance is not None:
            raise RuntimeError("You cannot create another ConfigController class")

        self.paths = config_paths(
            config_dir if config_dir is not None else Path("config"),
            config_file,
        )
        self.config: dict[str, Any] = {}
        self.load_config()
        ConfigController._instance = self

    @classmethod
    def get_instance(cls) -> "ConfigController":
        """Return the singleton instance of the controller."""

        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def load_from(cls, config_dir: Path) -> "ConfigController":
        """Return the singleton for ``config_dir``, replacing one loaded elsewhere."""

        current = cls._instance
        if current is not None and current.paths.config_dir == config_dir:
            current.load_config()
            return current
        cls._instance = None
        return cls(config_dir=config_dir)

    def load_config(self) -> None:
        """Load configuration from default and override YAML files."""

        self.config = load_config_files(self.paths)

    def save_config(self, config: dict[str, Any]) -> None:
        """Persist configuration to override.yaml, archiving previous overrides."""

        if self.paths.override_file.exists():
            archive_index = 1
            archive_file = self._archive_path(archive_index)
            while archive_file.exists():
                archive_index += 1
                archive_file = self._archive_path(archive_index)
            self.paths.override_file.rename(archive_file)

        with self.paths.override_file.open("w", encoding="utf-8") as file:
            yaml.safe_dump(config, file)

    def get_config(self) -> dict[str, Any]:
        """Return the currently loaded configuration."""

        return dict(self.config)

    def get_focus_config(self) -> dict[str, Any]:
        """Return the normalized ``health.focus`` section."""

        return dict(self.config["health"]["focus"])

    def set_config(self, config: dict[str, Any]) -> None:
        """Set and persist configuration values."""

        self.config = normalize_config(config)
        self.save_config(self.config)

    def _archive_path(self, index: int) -> Path:
        """Return the archive path for a given override index."""

        filename = f"override_{index:04d}.yaml"
        return self.paths.config_dir / filename
