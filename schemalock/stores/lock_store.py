"""Defensive reads and atomic writes for JSON lock files."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from ..logging import get_logger

_logger = get_logger("stores")


def read_json_mapping(path: Path) -> Optional[Dict[str, Any]]:
    """Return the JSON object stored at ``path``, or ``None`` if it is unusable.

    A missing file, unreadable content, invalid JSON and a non-object root
    are all reported the same way so callers can treat them as "no prior
    state".
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        _logger.info("Ignoring unreadable lock file %s: %s", path, exc)
        return None
    if not isinstance(data, dict):
        _logger.info("Ignoring lock file %s: expected a JSON object", path)
        return None
    return data


def write_json_atomic(path: Path, payload: Dict[str, Any]) -> None:
    """Write ``payload`` as minified JSON, replacing ``path`` in one rename."""
    content = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


__all__ = ["read_json_mapping", "write_json_atomic"]
