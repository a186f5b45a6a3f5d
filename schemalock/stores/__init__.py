"""Persistence helpers for lock files."""

from .lock_store import read_json_mapping, write_json_atomic

__all__ = ["read_json_mapping", "write_json_atomic"]
