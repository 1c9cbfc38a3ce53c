# src/context/detector.py — v1
"""Detect the invocation environment: operating system, shell, working dir.

Read-only: never writes and never raises. Unknown values become "".
"""

from __future__ import annotations

import os
import platform
from collections.abc import Mapping
from pathlib import PurePath, PureWindowsPath

from knock.core.models import ContextSnapshot

_OS_NAMES: dict[str, str] = {
    "darwin": "macos",
    "linux": "linux",
    "windows": "windows",
}


def detect_context(
    environ: Mapping[str, str] | None = None,
    system: str | None = None,
    cwd: str | None = None,
) -> ContextSnapshot:
    """Capture a ContextSnapshot for this invocation.

    Args:
        environ: Environment mapping (defaults to os.environ).
        system: platform.system() value override.
        cwd: Working directory override.
    """
    env = os.environ if environ is None else environ
    os_name = _detect_os(platform.system() if system is None else system)
    return ContextSnapshot(
        os=os_name,
        shell=_detect_shell(env, os_name),
        cwd=_current_dir() if cwd is None else cwd,
    )


def _detect_os(system: str) -> str:
    key = (system or "").strip().lower()
    return _OS_NAMES.get(key, key)


def _detect_shell(env: Mapping[str, str], os_name: str) -> str:
    shell = env.get("SHELL", "")
    if shell:
        # Windows paths (Git Bash, MSYS) may use backslashes
        name = PureWindowsPath(shell).name if "\\" in shell else PurePath(shell).name
        return name.removesuffix(".exe").lower()
    if os_name == "windows":
        return "powershell" if env.get("PSModulePath") else "cmd"
    return ""


def _current_dir() -> str:
    try:
        return os.getcwd()
    except OSError:
        return ""
