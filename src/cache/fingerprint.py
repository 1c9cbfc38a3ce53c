# src/cache/fingerprint.py — v3
"""Query fingerprinting for cache lookup.

A fingerprint is the SHA-256 of (query, os, shell, mode, scope). Each field
is length-prefixed and joined with the ASCII unit separator, so no two
distinct tuples serialize to the same byte string ("ab","c" vs "a","bc").
The working directory is not part of the key.
"""

from __future__ import annotations

import hashlib

from knock.core.errors import InputError
from knock.core.models import REQUEST_MODES, ContextSnapshot

FIELD_SEPARATOR = "\x1f"
FINGERPRINT_LENGTH = 64


def compute_fingerprint(
    query: str,
    ctx: ContextSnapshot,
    mode: str,
    scope: str = "",
) -> str:
    """Compute the cache key for a request.

    Args:
        query: Natural-language request (trimmed before hashing).
        ctx: Environment snapshot; only os and shell are used.
        mode: One of REQUEST_MODES.
        scope: Optional "provider:model" tag so different backends do not
            share cache entries.

    Returns:
        64-char lowercase hex digest.

    Raises:
        InputError: If the query is blank or the mode is unknown.
    """
    text = normalize_query(query)
    if mode not in REQUEST_MODES:
        raise InputError(f"Unknown request mode: {mode!r}")

    payload = _join_fields(text, ctx.os, ctx.shell, mode, scope)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def normalize_query(query: str) -> str:
    """Trim a query, rejecting blank input."""
    text = (query or "").strip()
    if not text:
        raise InputError("Query must not be empty")
    return text


def _join_fields(*fields: str) -> str:
    """Length-prefix each field then join with the unit separator."""
    return FIELD_SEPARATOR.join(f"{len(f)}:{f}" for f in fields)
