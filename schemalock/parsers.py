"""File parsers consumed by the lock-file subsystem."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

DEFAULT_MANIFEST_NAME = "package.json"


class _SchemaLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps as strings so parsed trees stay JSON-friendly."""


_SchemaLoader.add_constructor(
    "tag:yaml.org,2002:timestamp", _SchemaLoader.construct_yaml_str
)


def load_yaml(text: str) -> Any:
    """Parse YAML text into plain JSON-compatible data."""
    return yaml.load(text, Loader=_SchemaLoader)


@dataclass
class ParseResult:
    """Outcome of parsing a schema source file."""

    ok: bool
    data: Any = None
    errors: List[str] = field(default_factory=list)


class SchemaParser:
    """Parses JSON and YAML schema files, dispatching on file extension."""

    def parse(self, path: Path) -> ParseResult:
        suffix = path.suffix.lower()
        if suffix == ".json":
            return self._parse_json(path)
        if suffix in {".yaml", ".yml"}:
            return self._parse_yaml(path)
        return ParseResult(ok=False, errors=[f"Unsupported file extension: {suffix or '(none)'}"])

    def _parse_json(self, path: Path) -> ParseResult:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            return ParseResult(ok=False, errors=[f"Failed to parse {path.name}: {exc}"])
        return ParseResult(ok=True, data=data)

    def _parse_yaml(self, path: Path) -> ParseResult:
        try:
            data = load_yaml(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            return ParseResult(ok=False, errors=[f"Failed to parse {path.name}: {exc}"])
        return ParseResult(ok=True, data=data)


class ManifestReader:
    """Reads package identity from the manifest file in a directory."""

    def __init__(self, manifest_name: str = DEFAULT_MANIFEST_NAME) -> None:
        self.manifest_name = manifest_name

    def manifest_path(self, directory: Path) -> Path:
        return directory / self.manifest_name

    def exists(self, directory: Path) -> bool:
        return self.manifest_path(directory).is_file()

    def read(self, directory: Path) -> Optional[Dict[str, Any]]:
        """Return ``{name?, version?, workspaces?}`` or ``None`` when absent.

        Raises ``ValueError`` (or ``OSError``) when the manifest exists but
        cannot be read; callers translate that into their own error type.
        """
        path = self.manifest_path(directory)
        if not path.is_file():
            return None
        if path.suffix == ".toml":
            return self._read_pyproject(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.manifest_name} must contain an object at the root")
        return {
            key: data[key]
            for key in ("name", "version", "workspaces")
            if key in data
        }

    def _read_pyproject(self, path: Path) -> Dict[str, Any]:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
        project = data.get("project")
        if not isinstance(project, dict):
            return {}
        return {key: project[key] for key in ("name", "version") if key in project}


__all__ = ["DEFAULT_MANIFEST_NAME", "ManifestReader", "ParseResult", "SchemaParser", "load_yaml"]
