"""Consolidating per-package lock files into one monorepo lock file."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from . import LOCK_FILENAME
from .errors import (
    CorruptPackageLockError,
    ManifestReadError,
    NoPackagesFoundError,
    NotAMonorepoRootError,
    OrphanLockFileError,
)
from .hashing import content_hash
from .logging import get_logger
from .models import MonorepoLockFile, MonorepoPackage, PackageIdentity
from .parsers import ManifestReader
from .stores import read_json_mapping, write_json_atomic
from .versioning import negotiate_version

_DEPENDENCY_DIRS = {
    "node_modules",
    "__pycache__",
}

_BASELINE_TOOL_VERSION = "0.0.0"
_DEFAULT_PACKAGE_VERSION = "0.0.0"


class MonorepoAggregator:
    """Discovers package lock files below a root and aggregates them."""

    def __init__(
        self,
        manifest_reader: ManifestReader | None = None,
        *,
        lock_filename: str = LOCK_FILENAME,
    ) -> None:
        self.manifest_reader = manifest_reader or ManifestReader()
        self.lock_filename = lock_filename
        self.logger = get_logger("monorepo")

    @property
    def manifest_name(self) -> str:
        return self.manifest_reader.manifest_name

    def validate_root(self, root: Path) -> None:
        """Ensure ``root`` holds a readable package manifest."""
        if not self.manifest_reader.exists(root):
            raise NotAMonorepoRootError(
                f"No {self.manifest_name} found in {root}. "
                "The concat-lock command must be run from the monorepo root."
            )
        try:
            manifest = self.manifest_reader.read(root)
        except (OSError, ValueError) as exc:
            raise NotAMonorepoRootError(f"Invalid {self.manifest_name} in {root}: {exc}") from exc
        if manifest and manifest.get("workspaces"):
            self.logger.info("Detected monorepo with workspaces configuration")

    def discover(self, root: Path) -> List[Path]:
        """Return every package lock file below ``root``, excluding the root's own."""
        root = root.resolve()
        lock_files: List[Path] = []
        # os.walk skips directories it cannot list.
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(
                name
                for name in dirnames
                if name not in _DEPENDENCY_DIRS and not name.startswith(".")
            )
            current_dir = Path(dirpath)
            if current_dir == root or self.lock_filename not in filenames:
                continue
            lock_path = current_dir / self.lock_filename
            if not lock_path.is_file():
                continue
            if not self.manifest_reader.exists(current_dir):
                raise OrphanLockFileError(lock_path, self.manifest_name)
            lock_files.append(lock_path)
        self.logger.debug("Discovered %d package lock file(s) under %s", len(lock_files), root)
        return lock_files

    def read_package_identity(self, lock_path: Path) -> PackageIdentity:
        package_dir = lock_path.parent
        manifest_path = self.manifest_reader.manifest_path(package_dir)
        try:
            manifest = self.manifest_reader.read(package_dir) or {}
        except (OSError, ValueError) as exc:
            raise ManifestReadError(f"Could not read {manifest_path}: {exc}") from exc

        name = manifest.get("name")
        version = manifest.get("version")
        return PackageIdentity(
            name=name if isinstance(name, str) and name else package_dir.name,
            version=version if isinstance(version, str) and version else _DEFAULT_PACKAGE_VERSION,
        )

    def aggregate(
        self, root: Path, existing: Optional[Mapping[str, Any]] = None
    ) -> MonorepoLockFile:
        root = root.resolve()
        lock_paths = self.discover(root)
        if not lock_paths:
            raise NoPackagesFoundError(f"No {self.lock_filename} files found in the monorepo")

        packages: List[MonorepoPackage] = []
        highest_tool_version = _BASELINE_TOOL_VERSION
        for lock_path in lock_paths:
            data = self._read_package_lock(lock_path)
            identity = self.read_package_identity(lock_path)

            tool_version = data.get("toolVersion")
            if isinstance(tool_version, str) and tool_version > highest_tool_version:
                highest_tool_version = tool_version

            packages.append(
                MonorepoPackage(
                    package_name=identity.name,
                    package_version=identity.version,
                    file=lock_path.relative_to(root).as_posix(),
                    data=data,
                )
            )

        packages.sort(key=lambda package: package.package_name)

        lock = MonorepoLockFile(tool_version=highest_tool_version, packages=packages)
        lock.hash = content_hash(lock.content())
        lock.version = negotiate_version(existing, lock.hash)
        return lock

    def _read_package_lock(self, lock_path: Path) -> Dict[str, Any]:
        try:
            data = json.loads(lock_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CorruptPackageLockError(
                f"Could not process {self.lock_filename} file at {lock_path}: {exc}"
            ) from exc
        if not isinstance(data, dict):
            raise CorruptPackageLockError(
                f"Could not process {self.lock_filename} file at {lock_path}: expected a JSON object"
            )
        return data


def read_existing_monorepo_lock(path: Path) -> Optional[Dict[str, Any]]:
    """Return the prior monorepo lock at ``path``; anything else counts as absent."""
    data = read_json_mapping(path)
    if data is None:
        return None
    if data.get("isMonoRepo") is not True or not isinstance(data.get("packages"), list):
        get_logger("monorepo").info("Existing %s is not a monorepo lock file; ignoring it", path.name)
        return None
    return data


def write_monorepo_lock(lock: MonorepoLockFile, path: Path) -> None:
    write_json_atomic(path, lock.to_dict())


__all__ = ["MonorepoAggregator", "read_existing_monorepo_lock", "write_monorepo_lock"]
