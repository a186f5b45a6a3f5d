"""Two-part lock version parsing and negotiation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

INITIAL_VERSION = "1.0"


@dataclass(frozen=True)
class Version:
    """Parsed ``major.minor`` lock version."""

    major: int
    minor: int

    def __str__(self) -> str:
        return format_version(self.major, self.minor)


def parse_version(version: Any) -> Version:
    """Parse a stored version, migrating legacy integer versions to ``N.0``."""
    if isinstance(version, int) and not isinstance(version, bool):
        return Version(major=version, minor=0)

    parts = str(version).split(".") if version is not None else []
    major = _as_component(parts[0] if len(parts) > 0 else None, default=1)
    minor = _as_component(parts[1] if len(parts) > 1 else None, default=0)
    return Version(major=major, minor=minor)


def format_version(major: int, minor: int) -> str:
    return f"{major}.{minor}"


def negotiate_version(existing: Optional[Mapping[str, Any]], new_hash: str) -> str:
    """Return the version for ``new_hash`` given the previously recorded state.

    No prior record starts at ``1.0``. An unchanged hash keeps the prior
    version in its normalized form; any change bumps the minor component.
    """
    if existing is None:
        return INITIAL_VERSION

    current = parse_version(existing.get("version"))
    if existing.get("hash") == new_hash:
        return format_version(current.major, current.minor)
    return format_version(current.major, current.minor + 1)


def _as_component(value: Optional[str], *, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


__all__ = [
    "INITIAL_VERSION",
    "Version",
    "format_version",
    "negotiate_version",
    "parse_version",
]
