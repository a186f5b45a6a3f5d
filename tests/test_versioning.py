"""Tests for schemalock.versioning."""

from __future__ import annotations

import pytest

from schemalock.versioning import Version, format_version, negotiate_version, parse_version


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (5, Version(5, 0)),
        ("2.3", Version(2, 3)),
        ("4", Version(4, 0)),
        ("", Version(1, 0)),
        ("x.y", Version(1, 0)),
        (None, Version(1, 0)),
    ],
)
def test_parse_version(raw: object, expected: Version) -> None:
    assert parse_version(raw) == expected


def test_format_version() -> None:
    assert format_version(3, 12) == "3.12"
    assert str(Version(2, 0)) == "2.0"


def test_negotiate_starts_at_one_without_prior_state() -> None:
    assert negotiate_version(None, "abc") == "1.0"


def test_negotiate_bumps_minor_on_change() -> None:
    assert negotiate_version({"hash": "old", "version": "2.3"}, "new") == "2.4"


def test_negotiate_keeps_version_when_unchanged() -> None:
    assert negotiate_version({"hash": "same", "version": "2.3"}, "same") == "2.3"


def test_negotiate_migrates_legacy_integer_versions() -> None:
    assert negotiate_version({"hash": "same", "version": 5}, "same") == "5.0"
    assert negotiate_version({"hash": "old", "version": 5}, "new") == "5.1"
