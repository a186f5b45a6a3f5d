"""Reading schema source files into hashed records."""

from __future__ import annotations

from pathlib import Path

from .errors import SchemaFileNotFoundError, SchemaParseError
from .hashing import content_hash
from .models import SchemaSource
from .parsers import SchemaParser


class SchemaSourceReader:
    """Resolves, parses and hashes schema files relative to a base directory."""

    def __init__(self, parser: SchemaParser | None = None, base_dir: Path | None = None) -> None:
        self.parser = parser or SchemaParser()
        self.base_dir = base_dir

    def resolve(self, path: str) -> Path:
        base = self.base_dir if self.base_dir is not None else Path.cwd()
        return (base / Path(path).expanduser()).resolve()

    def exists(self, path: str) -> bool:
        return self.resolve(path).is_file()

    def read(self, path: str) -> SchemaSource:
        """Return a ``SchemaSource`` whose ``file`` is ``path`` exactly as given."""
        absolute = self.resolve(path)
        if not absolute.is_file():
            raise SchemaFileNotFoundError(path)

        result = self.parser.parse(absolute)
        if not result.ok:
            raise SchemaParseError(path, result.errors)

        return SchemaSource(file=path, data=result.data, hash=content_hash(result.data))


__all__ = ["SchemaSourceReader"]
