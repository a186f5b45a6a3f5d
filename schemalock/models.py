"""Core data models for package and monorepo lock files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class SchemaSource:
    """A parsed schema file together with its content hash."""

    file: str
    data: Any
    hash: str

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "data": self.data, "hash": self.hash}


@dataclass
class GenerationSources:
    """Schema sources feeding one generation target."""

    events: SchemaSource
    groups: Optional[List[SchemaSource]] = None
    dimensions: Optional[List[SchemaSource]] = None
    meta: Optional[SchemaSource] = None

    def to_dict(self) -> Dict[str, Any]:
        # Optional sources are left out entirely rather than written as empty lists.
        payload: Dict[str, Any] = {"events": self.events.to_dict()}
        if self.groups:
            payload["groups"] = [source.to_dict() for source in self.groups]
        if self.dimensions:
            payload["dimensions"] = [source.to_dict() for source in self.dimensions]
        if self.meta is not None:
            payload["meta"] = self.meta.to_dict()
        return payload


@dataclass
class GenerationEntry:
    """Lock record for one configured output target."""

    output: str
    config: Dict[str, Any]
    sources: GenerationSources
    hash: str
    version: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "output": self.output,
            "config": self.config,
            "sources": self.sources.to_dict(),
            "hash": self.hash,
            "version": self.version,
        }


@dataclass
class LockFile:
    """Package lock file written by the generate command."""

    tool_version: str
    config_file: str
    generates: List[GenerationEntry] = field(default_factory=list)
    version: str = "1.0"
    hash: str = ""

    def content(self) -> Dict[str, Any]:
        """Return the hashed shell, without version and hash."""
        return {
            "toolVersion": self.tool_version,
            "configFile": self.config_file,
            "generates": [entry.to_dict() for entry in self.generates],
        }

    def to_dict(self) -> Dict[str, Any]:
        payload = self.content()
        payload["version"] = self.version
        payload["hash"] = self.hash
        return payload


@dataclass
class MonorepoPackage:
    """One package lock file as recorded in the monorepo lock."""

    package_name: str
    package_version: str
    file: str
    data: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "packageName": self.package_name,
            "packageVersion": self.package_version,
            "file": self.file,
            "data": self.data,
        }


@dataclass
class MonorepoLockFile:
    """Consolidated lock file written at the monorepo root."""

    tool_version: str
    packages: List[MonorepoPackage] = field(default_factory=list)
    version: str = "1.0"
    hash: str = ""

    def content(self) -> Dict[str, Any]:
        """Return the hashed shell, without version and hash."""
        return {
            "toolVersion": self.tool_version,
            "isMonoRepo": True,
            "packages": [package.to_dict() for package in self.packages],
        }

    def to_dict(self) -> Dict[str, Any]:
        payload = self.content()
        payload["version"] = self.version
        payload["hash"] = self.hash
        return payload


@dataclass(frozen=True)
class PackageIdentity:
    """Name and version read from a package manifest."""

    name: str
    version: str


__all__ = [
    "GenerationEntry",
    "GenerationSources",
    "LockFile",
    "MonorepoLockFile",
    "MonorepoPackage",
    "PackageIdentity",
    "SchemaSource",
]
