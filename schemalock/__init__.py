"""Schema lock-file fingerprinting and monorepo aggregation."""

LOCK_FILENAME = "schema.lock"

__all__ = ["LOCK_FILENAME"]
