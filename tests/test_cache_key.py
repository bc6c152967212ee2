"""
Unit tests for the cache key generator.
"""
import hashlib

import pytest

from affaldsplan.cache_key import cache_key_for, canonicalize, key_of


def test_canonicalize_drops_format_and_sorts_keys():
    canonical = canonicalize({"format": "text", "zeta": "1", "addressId": "123"})
    assert list(canonical) == ["addressId", "zeta"]
    assert canonical == {"addressId": "123", "zeta": "1"}


def test_canonicalize_does_not_modify_input():
    query = {"format": "ics", "addressId": "123"}
    canonicalize(query)
    assert query == {"format": "ics", "addressId": "123"}


@pytest.mark.parametrize(
    "other",
    [
        {"addressId": "123", "format": "ics"},
        {"format": "text", "addressId": "123"},
        {"addressId": "123"},
    ],
)
def test_equivalent_queries_share_a_key(other):
    """Key order and the format selector do not change the key."""
    assert cache_key_for({"addressId": "123"}) == cache_key_for(other)


def test_different_address_gives_different_key():
    assert cache_key_for({"addressId": "123"}) != cache_key_for({"addressId": "124"})


def test_extra_content_parameter_changes_key():
    assert cache_key_for({"addressId": "123"}) != cache_key_for(
        {"addressId": "123", "lang": "da"}
    )


def test_key_is_fixed_length_hex():
    key = key_of(canonicalize({"addressId": "123", "street": "Ærøvej 5"}))
    assert len(key) == 40
    int(key, 16)


def test_key_is_sha1_of_compact_json():
    """The serialization is fixed, so the digest is known in advance."""
    expected = hashlib.sha1(b'{"addressId":"123"}').hexdigest()
    assert key_of({"addressId": "123"}) == expected
    assert cache_key_for({"format": "text", "addressId": "123"}) == expected
