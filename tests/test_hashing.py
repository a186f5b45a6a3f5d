"""Tests for schemalock.hashing."""

from __future__ import annotations

import hashlib

import pytest

from schemalock.errors import UnserializableContentError
from schemalock.hashing import HASH_LENGTH, canonicalize, content_hash, serialize


def test_hash_ignores_key_insertion_order_at_every_depth() -> None:
    first = {"b": 1, "a": {"y": [1, {"q": 1, "p": 2}], "x": None}}
    second = {"a": {"x": None, "y": [1, {"p": 2, "q": 1}]}, "b": 1}

    assert content_hash(first) == content_hash(second)


def test_hash_preserves_list_order() -> None:
    assert content_hash([1, 2, 3]) != content_hash([3, 2, 1])


def test_canonicalize_sorts_nested_keys() -> None:
    canonical = canonicalize({"z": {"b": 1, "a": 2}, "a": [{"d": 1, "c": 2}]})

    assert list(canonical) == ["a", "z"]
    assert list(canonical["z"]) == ["a", "b"]
    assert list(canonical["a"][0]) == ["c", "d"]


def test_hash_is_truncated_sha256_of_compact_json() -> None:
    value = {"name": "page_view", "tags": ["ä", 1]}
    expected = hashlib.sha256('{"name":"page_view","tags":["ä",1]}'.encode("utf-8")).hexdigest()

    assert serialize(value) == '{"name":"page_view","tags":["ä",1]}'
    assert content_hash(value) == expected[:HASH_LENGTH]
    assert len(content_hash(value)) == 16


def test_hash_rejects_unserializable_members() -> None:
    with pytest.raises(UnserializableContentError):
        content_hash({"callback": lambda: None})


def test_hash_rejects_reference_cycles() -> None:
    looped: dict[str, object] = {"name": "loop"}
    looped["self"] = looped

    with pytest.raises(UnserializableContentError):
        content_hash(looped)


def test_shared_subtrees_are_not_cycles() -> None:
    shared = {"type": "string"}

    assert content_hash({"a": shared, "b": shared}) == content_hash(
        {"a": {"type": "string"}, "b": {"type": "string"}}
    )


def test_hash_rejects_keys_that_collide_as_strings() -> None:
    with pytest.raises(UnserializableContentError, match="colliding keys"):
        content_hash({"outer": {1: "a", "1": "b"}})
