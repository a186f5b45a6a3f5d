"""Building and writing package lock files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from . import LOCK_FILENAME
from .config import GenerationConfig
from .errors import MissingRequiredSourceError
from .hashing import content_hash
from .logging import get_logger
from .models import GenerationEntry, GenerationSources, LockFile, SchemaSource
from .sources import SchemaSourceReader
from .stores import read_json_mapping, write_json_atomic
from .versioning import negotiate_version, parse_version

_logger = get_logger("lockfile")


@dataclass
class EntryChange:
    """Version movement of one generation entry between two lock files."""

    output: str
    previous_version: Optional[str]
    version: str
    changed: bool

    @property
    def status(self) -> str:
        if self.previous_version is None:
            return "new"
        return "changed" if self.changed else "unchanged"


class GenerationEntryBuilder:
    """Turns one generation config into a hashed, versioned lock entry."""

    def __init__(self, reader: SchemaSourceReader | None = None) -> None:
        self.reader = reader or SchemaSourceReader()
        self.logger = get_logger("lockfile")

    def build(
        self,
        gen_config: GenerationConfig,
        existing_entry: Optional[Mapping[str, Any]] = None,
    ) -> GenerationEntry:
        sources = self._read_sources(gen_config)
        config = gen_config.without_output()
        entry_hash = content_hash({"config": config, "sources": sources.to_dict()})
        version = negotiate_version(existing_entry, entry_hash)
        self.logger.debug("Entry %s hashed to %s (version %s)", gen_config.output, entry_hash, version)
        return GenerationEntry(
            output=gen_config.output,
            config=config,
            sources=sources,
            hash=entry_hash,
            version=version,
        )

    def _read_sources(self, gen_config: GenerationConfig) -> GenerationSources:
        if gen_config.merged_schema_file:
            return GenerationSources(events=self.reader.read(gen_config.merged_schema_file))

        if not gen_config.events:
            raise MissingRequiredSourceError(
                f"Generation config for {gen_config.output} must have either events or mergedSchemaFile"
            )

        sources = GenerationSources(events=self.reader.read(gen_config.events))
        groups = self._read_optional(gen_config.groups, kind="Group")
        if groups:
            sources.groups = groups
        dimensions = self._read_optional(gen_config.dimensions, kind="Dimension")
        if dimensions:
            sources.dimensions = dimensions
        if gen_config.meta:
            meta = self._read_optional([gen_config.meta], kind="Meta")
            if meta:
                sources.meta = meta[0]
        return sources

    def _read_optional(self, paths: Iterable[str], *, kind: str) -> List[SchemaSource]:
        sources: List[SchemaSource] = []
        for path in paths:
            if not self.reader.exists(path):
                self.logger.info("%s file not found at %s, skipping.", kind, path)
                continue
            sources.append(self.reader.read(path))
        return sources


class LockFileAssembler:
    """Combines generation entries and tool metadata into a package lock file."""

    def __init__(
        self,
        builder: GenerationEntryBuilder | None = None,
        *,
        tool_version: str,
        config_file: str,
    ) -> None:
        self.builder = builder or GenerationEntryBuilder()
        self.tool_version = tool_version
        self.config_file = config_file

    def assemble(
        self,
        generation_configs: Sequence[GenerationConfig],
        existing_lock: Optional[Mapping[str, Any]] = None,
    ) -> LockFile:
        previous = _entries_by_output(existing_lock)
        generates = [
            self.builder.build(gen_config, previous.get(gen_config.output))
            for gen_config in generation_configs
        ]
        lock = LockFile(
            tool_version=self.tool_version,
            config_file=self.config_file,
            generates=generates,
        )
        lock.hash = content_hash(lock.content())
        lock.version = negotiate_version(existing_lock, lock.hash)
        return lock


def lock_file_path(root: Path) -> Path:
    return root / LOCK_FILENAME


def read_existing_lock_file(path: Path) -> Optional[Dict[str, Any]]:
    """Return the prior lock file at ``path``; unusable files count as absent.

    Besides parse failures, an object without a ``generates`` list and a
    string ``hash`` is ignored, and so is a monorepo lock sitting at the
    package path.
    """
    data = read_json_mapping(path)
    if data is None:
        return None
    if (
        data.get("isMonoRepo") is True
        or not isinstance(data.get("generates"), list)
        or not isinstance(data.get("hash"), str)
    ):
        _logger.info("Existing %s is not a package lock file; ignoring it", path.name)
        return None
    return data


def write_lock_file(lock: LockFile, path: Path) -> None:
    write_json_atomic(path, lock.to_dict())


def summarize_changes(
    lock: LockFile, existing_lock: Optional[Mapping[str, Any]]
) -> List[EntryChange]:
    previous = _entries_by_output(existing_lock)
    changes: List[EntryChange] = []
    for entry in lock.generates:
        prior = previous.get(entry.output)
        if prior is None:
            changes.append(EntryChange(entry.output, None, entry.version, True))
            continue
        changes.append(
            EntryChange(
                output=entry.output,
                previous_version=str(parse_version(prior.get("version"))),
                version=entry.version,
                changed=prior.get("hash") != entry.hash,
            )
        )
    return changes


def _entries_by_output(existing_lock: Optional[Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
    if not existing_lock:
        return {}
    generates = existing_lock.get("generates")
    if not isinstance(generates, list):
        return {}
    entries: Dict[str, Dict[str, Any]] = {}
    for entry in generates:
        if not isinstance(entry, dict):
            continue
        output = entry.get("output")
        # First match wins.
        if isinstance(output, str) and output not in entries:
            entries[output] = entry
    return entries


__all__ = [
    "EntryChange",
    "GenerationEntryBuilder",
    "LockFileAssembler",
    "lock_file_path",
    "read_existing_lock_file",
    "summarize_changes",
    "write_lock_file",
]
