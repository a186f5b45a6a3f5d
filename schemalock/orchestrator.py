"""Pipeline orchestration for the generate and concat-lock commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .config import ProjectConfig, load_config, tool_version
from .lockfile import (
    EntryChange,
    GenerationEntryBuilder,
    LockFileAssembler,
    lock_file_path,
    read_existing_lock_file,
    summarize_changes,
    write_lock_file,
)
from .logging import get_logger
from .models import LockFile, MonorepoLockFile
from .monorepo import MonorepoAggregator, read_existing_monorepo_lock, write_monorepo_lock
from .parsers import SchemaParser
from .sources import SchemaSourceReader
from .versioning import parse_version


@dataclass
class GenerateOutcome:
    """Result of writing a package lock file."""

    path: Path
    lock: LockFile
    previous_version: Optional[str]
    changes: List[EntryChange]


@dataclass
class ConcatOutcome:
    """Result of aggregating package lock files at a monorepo root."""

    path: Path
    lock: MonorepoLockFile
    previous_version: Optional[str]
    written: bool


class Orchestrator:
    """Coordinates lock-file runs with explicitly injected collaborators."""

    def __init__(
        self,
        parser: SchemaParser | None = None,
        aggregator: MonorepoAggregator | None = None,
        tool_version: str | None = None,
    ) -> None:
        self.parser = parser or SchemaParser()
        self.aggregator = aggregator or MonorepoAggregator()
        self._tool_version = tool_version
        self.logger = get_logger("orchestrator")

    def run_generate(self, path: str, *, config_path: str | None = None) -> GenerateOutcome:
        """Assemble and write the lock file for the package at ``path``."""
        project_root = Path(path).expanduser().resolve()
        self.logger.info("Starting generate run for %s", project_root)
        config = self._load_config(project_root, config_path)
        self.logger.debug("Loaded %d generation target(s) from %s", len(config.generates), config.config_file)

        reader = SchemaSourceReader(self.parser, base_dir=config.root)
        assembler = LockFileAssembler(
            GenerationEntryBuilder(reader),
            tool_version=self._resolve_tool_version(),
            config_file=config.config_file,
        )

        target = lock_file_path(config.root)
        existing = read_existing_lock_file(target)
        lock = assembler.assemble(config.generates, existing)
        write_lock_file(lock, target)
        self.logger.info("Lock file written to %s (version %s)", target, lock.version)

        previous_version = str(parse_version(existing.get("version"))) if existing else None
        return GenerateOutcome(
            path=target,
            lock=lock,
            previous_version=previous_version,
            changes=summarize_changes(lock, existing),
        )

    def run_concat(self, path: str) -> ConcatOutcome:
        """Aggregate package lock files below the monorepo root at ``path``."""
        root = Path(path).expanduser().resolve()
        self.logger.info("Validating monorepo root %s", root)
        self.aggregator.validate_root(root)

        self.logger.info("Scanning for %s files in monorepo", self.aggregator.lock_filename)
        target = root / self.aggregator.lock_filename
        existing = read_existing_monorepo_lock(target)
        lock = self.aggregator.aggregate(root, existing)
        previous_version = str(parse_version(existing.get("version"))) if existing else None

        if existing is not None and existing.get("hash") == lock.hash:
            self.logger.info("No changes detected in package lock files; skipping write")
            return ConcatOutcome(path=target, lock=lock, previous_version=previous_version, written=False)

        write_monorepo_lock(lock, target)
        self.logger.info("Monorepo lock written to %s (version %s)", target, lock.version)
        return ConcatOutcome(path=target, lock=lock, previous_version=previous_version, written=True)

    def _load_config(self, project_root: Path, config_path: str | None) -> ProjectConfig:
        if config_path is None:
            return load_config(project_root)
        candidate = Path(config_path).expanduser()
        if not candidate.is_absolute():
            candidate = project_root / candidate
        return load_config(candidate)

    def _resolve_tool_version(self) -> str:
        if self._tool_version is None:
            self._tool_version = tool_version()
        return self._tool_version


__all__ = ["ConcatOutcome", "GenerateOutcome", "Orchestrator"]
