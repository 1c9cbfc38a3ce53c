# tests/unit/core/test_unit_models.py — v2
"""Tests for core/models.py — shared Pydantic models.

Also covers version.py import validation.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from knock.core.models import (
    REQUEST_MODES,
    ContextSnapshot,
    HistoryEntry,
    ProviderResponse,
)


class TestVersion:
    def test_version_exported(self):
        from knock import __version__
        from knock.version import __version__ as raw

        assert __version__ == raw
        assert __version__.count(".") == 2


class TestRequestModes:
    def test_all_modes(self):
        assert set(REQUEST_MODES) == {"standard", "verbose", "alt", "explain"}


class TestContextSnapshot:
    def test_defaults_are_empty(self):
        ctx = ContextSnapshot()
        assert (ctx.os, ctx.shell, ctx.cwd) == ("", "", "")

    def test_frozen(self):
        ctx = ContextSnapshot(os="linux")
        with pytest.raises(ValidationError):
            ctx.os = "macos"  # type: ignore[misc]

    def test_equality_by_value(self):
        assert ContextSnapshot(os="linux", shell="bash") == ContextSnapshot(os="linux", shell="bash")


class TestProviderResponse:
    def test_minimal(self):
        r = ProviderResponse(command="ls -S")
        assert r.explanation is None
        assert r.alternatives is None

    def test_full(self):
        r = ProviderResponse(command="du -sh *", explanation="sizes", alternatives=["ncdu"])
        assert r.alternatives == ["ncdu"]

    @pytest.mark.parametrize("command", ["", "   ", "\n"])
    def test_blank_command_rejected(self, command):
        with pytest.raises(ValidationError, match="command"):
            ProviderResponse(command=command)

    def test_json_roundtrip(self):
        r = ProviderResponse(command="ps aux", alternatives=["top"])
        assert ProviderResponse.model_validate_json(r.model_dump_json()) == r


class TestHistoryEntry:
    def test_fields(self):
        e = HistoryEntry(query="list files", command="ls", timestamp=1_700_000_000)
        assert e.timestamp == 1_700_000_000

    def test_frozen(self):
        e = HistoryEntry(query="q", command="c", timestamp=1)
        with pytest.raises(ValidationError):
            e.command = "x"  # type: ignore[misc]
