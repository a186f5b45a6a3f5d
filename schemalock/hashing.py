"""Deterministic content hashing for lock-file fingerprints."""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, Mapping, Set

from .errors import UnserializableContentError

HASH_LENGTH = 16


def canonicalize(value: Any) -> Any:
    """Return ``value`` with mapping keys sorted at every nesting depth.

    Lists and tuples keep their order; scalars are returned unchanged. Keys
    are coerced to strings; two keys that coerce to the same string raise
    ``UnserializableContentError``.
    """
    return _canonicalize(value, set())


def _canonicalize(value: Any, active: Set[int]) -> Any:
    if isinstance(value, Mapping):
        marker = id(value)
        if marker in active:
            raise UnserializableContentError("Cannot hash content containing a reference cycle")
        active.add(marker)
        try:
            items: Dict[str, Any] = {}
            for key, item in value.items():
                name = str(key)
                if name in items:
                    raise UnserializableContentError(
                        f"Cannot hash content with colliding keys: {name!r}"
                    )
                items[name] = item
            return {key: _canonicalize(items[key], active) for key in sorted(items)}
        finally:
            active.discard(marker)
    if isinstance(value, (list, tuple)):
        marker = id(value)
        if marker in active:
            raise UnserializableContentError("Cannot hash content containing a reference cycle")
        active.add(marker)
        try:
            return [_canonicalize(item, active) for item in value]
        finally:
            active.discard(marker)
    return value


def serialize(value: Any) -> str:
    """Serialize canonical content to the compact JSON form that gets hashed."""
    try:
        return json.dumps(
            canonicalize(value),
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as exc:
        raise UnserializableContentError(f"Cannot hash content: {exc}") from exc


def content_hash(value: Any) -> str:
    """Return the truncated SHA-256 hex digest of ``value``'s canonical form."""
    payload = serialize(value).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()[:HASH_LENGTH]


__all__ = ["HASH_LENGTH", "canonicalize", "content_hash", "serialize"]
