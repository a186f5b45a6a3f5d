"""Exception types raised by the lock-file subsystem."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List


class LockFileError(RuntimeError):
    """Base class for fatal lock-file errors."""


class SchemaFileNotFoundError(LockFileError):
    """Raised when a configured schema source file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Schema file not found: {path}")
        self.path = path


class SchemaParseError(LockFileError):
    """Raised when a schema source file cannot be parsed."""

    def __init__(self, path: str, errors: Iterable[str]) -> None:
        self.path = path
        self.errors: List[str] = list(errors)
        detail = ", ".join(self.errors) if self.errors else "Unknown parsing error"
        super().__init__(f"Failed to parse schema file {path}: {detail}")


class MissingRequiredSourceError(LockFileError):
    """Raised when a generation target does not declare an events source."""


class UnserializableContentError(LockFileError):
    """Raised when content handed to the hasher cannot be serialized."""


class NotAMonorepoRootError(LockFileError):
    """Raised when concat-lock runs outside a directory holding a manifest."""


class OrphanLockFileError(LockFileError):
    """Raised when a package lock file has no manifest beside it."""

    def __init__(self, lock_path: Path, manifest_name: str) -> None:
        super().__init__(
            f"Found {lock_path.name} at {lock_path} but no {manifest_name} in the same "
            f"directory. Each {lock_path.name} must be in a package root with a {manifest_name}."
        )
        self.lock_path = lock_path


class CorruptPackageLockError(LockFileError):
    """Raised when a discovered package lock file cannot be read."""


class NoPackagesFoundError(LockFileError):
    """Raised when no package lock files exist below the monorepo root."""


class ManifestReadError(LockFileError):
    """Raised when a package manifest exists but cannot be parsed."""


__all__ = [
    "CorruptPackageLockError",
    "LockFileError",
    "ManifestReadError",
    "MissingRequiredSourceError",
    "NoPackagesFoundError",
    "NotAMonorepoRootError",
    "OrphanLockFileError",
    "SchemaFileNotFoundError",
    "SchemaParseError",
    "UnserializableContentError",
]
