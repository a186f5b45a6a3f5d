"""Configuration loading for schemalock (schema.config.json / .yml)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from importlib import metadata
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import LockFileError
from .parsers import load_yaml

CONFIG_FILENAMES = ("schema.config.json", "schema.config.yml", "schema.config.yaml")

_DISTRIBUTION_NAME = "schemalock"
_FALLBACK_TOOL_VERSION = "0.0.0"


class ConfigError(LockFileError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class GenerationConfig:
    """One entry of the ``generates`` list.

    ``raw`` keeps every key exactly as configured because the whole mapping
    (minus ``output``) takes part in the entry hash.
    """

    output: str
    events: Optional[str] = None
    groups: List[str] = field(default_factory=list)
    dimensions: List[str] = field(default_factory=list)
    meta: Optional[str] = None
    merged_schema_file: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    def without_output(self) -> Dict[str, Any]:
        return {key: value for key, value in self.raw.items() if key != "output"}

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "GenerationConfig":
        output = _as_str(data.get("output"))
        if not output:
            raise ConfigError("Each generates entry must define an output path")
        return cls(
            output=output,
            events=_as_str(data.get("events")),
            groups=_as_str_list(data.get("groups")),
            dimensions=_as_str_list(data.get("dimensions")),
            meta=_as_str(data.get("meta")),
            merged_schema_file=_as_str(data.get("mergedSchemaFile")),
            raw=dict(data),
        )


@dataclass
class ProjectConfig:
    """Represents the generation settings of one package."""

    root: Path
    config_file: str
    generates: List[GenerationConfig] = field(default_factory=list)


def load_config(config_path: Path) -> ProjectConfig:
    """Load the project configuration from a file or a directory containing one."""
    config_file = _resolve_config_path(config_path)
    if config_file is None or not config_file.exists():
        names = ", ".join(CONFIG_FILENAMES)
        raise ConfigError(f"No configuration file found in {config_path} (expected one of: {names})")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    raw_generates = data.get("generates")
    if raw_generates is None:
        raw_generates = []
    if not isinstance(raw_generates, list):
        raise ConfigError(f"'generates' in {config_file.name} must be a list")

    generates: List[GenerationConfig] = []
    for index, item in enumerate(raw_generates):
        if not isinstance(item, dict):
            raise ConfigError(f"generates[{index}] in {config_file.name} must be a mapping")
        generates.append(GenerationConfig.from_mapping(item))

    return ProjectConfig(
        root=config_file.parent,
        config_file=config_file.name,
        generates=generates,
    )


def tool_version() -> str:
    """Return the installed schemalock version recorded in lock files."""
    try:
        return metadata.version(_DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return _FALLBACK_TOOL_VERSION


def _resolve_config_path(config_path: Path) -> Optional[Path]:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        for name in CONFIG_FILENAMES:
            candidate = config_path / name
            if candidate.is_file():
                return candidate.resolve()
        return None
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}

    if path.suffix.lower() == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc

    try:
        loaded = load_yaml(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAMES",
    "ConfigError",
    "GenerationConfig",
    "ProjectConfig",
    "load_config",
    "tool_version",
]
