"""
This module derives deterministic cache keys from calendar request queries.
"""
import hashlib
import json
from typing import Dict, Mapping

# Parameters that only change how a calendar is serialized, not its content
PRESENTATION_PARAMETERS = frozenset({"format"})


def canonicalize(query: Mapping[str, str]) -> Dict[str, str]:
    """
    Drops presentation-only parameters and orders the rest by name.

    Args:
        query: The raw query parameters of the request.

    Returns:
        A new dict with lexicographically sorted keys and string values.
    """
    return {
        str(name): str(query[name])
        for name in sorted(query)
        if name not in PRESENTATION_PARAMETERS
    }


def key_of(canonical_query: Mapping[str, str]) -> str:
    """Returns the SHA1 hex digest of the serialized canonical query."""
    serialized = json.dumps(
        canonical_query, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    return hashlib.sha1(serialized.encode("utf-8")).hexdigest()


def cache_key_for(query: Mapping[str, str]) -> str:
    return key_of(canonicalize(query))
