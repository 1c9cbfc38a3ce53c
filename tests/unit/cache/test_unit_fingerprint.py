# tests/unit/cache/test_unit_fingerprint.py — v1
"""Tests for cache/fingerprint.py — determinism, distinctness, input checks."""

from __future__ import annotations

import pytest

from knock.cache.fingerprint import FINGERPRINT_LENGTH, compute_fingerprint, normalize_query
from knock.core.errors import InputError
from knock.core.models import ContextSnapshot

LINUX_BASH = ContextSnapshot(os="linux", shell="bash", cwd="/tmp")


class TestDeterminism:
    def test_same_inputs_same_fingerprint(self):
        a = compute_fingerprint("list files", LINUX_BASH, "standard")
        b = compute_fingerprint("list files", LINUX_BASH, "standard")
        assert a == b

    def test_fixed_length_hex(self):
        fp = compute_fingerprint("list files", LINUX_BASH, "standard")
        assert len(fp) == FINGERPRINT_LENGTH
        int(fp, 16)

    def test_surrounding_whitespace_ignored(self):
        a = compute_fingerprint("  list files\n", LINUX_BASH, "standard")
        b = compute_fingerprint("list files", LINUX_BASH, "standard")
        assert a == b

    def test_cwd_not_part_of_key(self):
        other_dir = ContextSnapshot(os="linux", shell="bash", cwd="/var/log")
        assert compute_fingerprint("a", LINUX_BASH, "standard") == compute_fingerprint(
            "a", other_dir, "standard"
        )


class TestDistinctness:
    def test_shell_differs(self):
        zsh = ContextSnapshot(os="linux", shell="zsh")
        assert compute_fingerprint("a", LINUX_BASH, "standard") != compute_fingerprint(
            "a", zsh, "standard"
        )

    def test_os_differs(self):
        mac = ContextSnapshot(os="macos", shell="bash")
        assert compute_fingerprint("a", LINUX_BASH, "standard") != compute_fingerprint(
            "a", mac, "standard"
        )

    def test_query_differs(self):
        assert compute_fingerprint("a", LINUX_BASH, "standard") != compute_fingerprint(
            "b", LINUX_BASH, "standard"
        )

    @pytest.mark.parametrize("other", ["verbose", "alt", "explain"])
    def test_mode_differs(self, other):
        assert compute_fingerprint("a", LINUX_BASH, "standard") != compute_fingerprint(
            "a", LINUX_BASH, other
        )

    def test_field_boundaries_unambiguous(self):
        ab_c = compute_fingerprint("ab", ContextSnapshot(os="c", shell=""), "standard")
        a_bc = compute_fingerprint("a", ContextSnapshot(os="bc", shell=""), "standard")
        assert ab_c != a_bc

    def test_separator_inside_field_unambiguous(self):
        left = compute_fingerprint("a\x1fb", ContextSnapshot(os="", shell="x"), "standard")
        right = compute_fingerprint("a", ContextSnapshot(os="b", shell="x"), "standard")
        assert left != right

    def test_scope_differs(self):
        a = compute_fingerprint("a", LINUX_BASH, "standard", scope="openai:gpt-4o-mini")
        b = compute_fingerprint("a", LINUX_BASH, "standard", scope="ollama:llama3")
        assert a != b

    def test_empty_context_fields_allowed(self):
        fp = compute_fingerprint("a", ContextSnapshot(), "standard")
        assert len(fp) == FINGERPRINT_LENGTH


class TestInputValidation:
    @pytest.mark.parametrize("query", ["", "   ", "\n\t"])
    def test_blank_query_rejected(self, query):
        with pytest.raises(InputError):
            compute_fingerprint(query, LINUX_BASH, "standard")

    def test_unknown_mode_rejected(self):
        with pytest.raises(InputError, match="mode"):
            compute_fingerprint("a", LINUX_BASH, "turbo")

    def test_normalize_query_trims(self):
        assert normalize_query("  hi  ") == "hi"
