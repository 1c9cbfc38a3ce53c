# src/llm/parser.py — v2
"""Turn raw completion text into a ProviderResponse.

Models wrap output in code fences or prompt markers now and then even when
told not to; those are stripped before the mode-specific parse. A response
without a usable command raises MalformedResponseError.
"""

from __future__ import annotations

import re

from knock.core.errors import MalformedResponseError
from knock.core.models import ProviderResponse

_FENCE_RE = re.compile(r"^```[\w-]*\s*\n?(.*?)\n?```\s*$", re.DOTALL)
_FENCE_LINE_RE = re.compile(r"^\s*```[\w-]*\s*$")
_PROMPT_RE = re.compile(r"^(?:\$|>|PS>)\s+")
_NUMBER_RE = re.compile(r"^\s*(?:\d+[.)]|[-*])\s+")
_SECTION_RE = re.compile(r"^(PRIMARY|ALTERNATIVES|OPTIONS)\s*:\s*(.*)$", re.IGNORECASE)
_GLOSS_SEP = " — "


def parse_response(text: str, mode: str, query: str = "") -> ProviderResponse:
    """Parse completion text for the given mode.

    Args:
        text: Raw text extracted from the provider payload.
        mode: Request mode the prompt was built for.
        query: Original query; in explain mode this is the explained command.

    Raises:
        MalformedResponseError: If no command (or explanation) can be found.
    """
    body = strip_fences(text or "")

    if mode == "explain":
        if not body:
            raise MalformedResponseError("Empty explanation in provider response")
        return ProviderResponse(command=query.strip(), explanation=body)

    if mode == "verbose":
        return _parse_verbose(_drop_fence_lines(body))

    lines = _fenced_lines(body)
    if lines is None:
        lines = body.splitlines()

    if mode == "alt":
        return _parse_alternatives(lines)

    return ProviderResponse(command=_require_command(_clean_line("\n".join(lines))))


def strip_fences(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def _drop_fence_lines(body: str) -> str:
    return "\n".join(
        line for line in body.splitlines() if not _FENCE_LINE_RE.match(line)
    )


def _fenced_lines(body: str) -> list[str] | None:
    """Lines inside code fences embedded in prose, or None without fences."""
    inside = False
    seen = False
    lines: list[str] = []
    for line in body.splitlines():
        if _FENCE_LINE_RE.match(line):
            inside = not inside
            seen = True
            continue
        if inside:
            lines.append(line)
    return lines if seen else None


def _parse_verbose(body: str) -> ProviderResponse:
    sections: dict[str, list[str]] = {}
    current: str | None = None
    for line in body.splitlines():
        match = _SECTION_RE.match(line.strip())
        if match:
            current = match.group(1).upper()
            sections.setdefault(current, [])
            if match.group(2).strip():
                sections[current].append(match.group(2).strip())
            continue
        if current is not None and line.strip():
            sections[current].append(line.strip())

    if "PRIMARY" not in sections:
        # No section headers: first non-blank line is the command.
        lines = body.strip().splitlines()
        command = _require_command(_clean_line(lines[0]) if lines else "")
        rest = "\n".join(lines[1:]).strip()
        return ProviderResponse(command=command, explanation=rest or None)

    primary = sections["PRIMARY"]
    command = _require_command(_clean_line(primary[0]) if primary else "")
    alternatives = [
        _clean_line(_strip_numbering(a).split(_GLOSS_SEP, 1)[0])
        for a in sections.get("ALTERNATIVES", [])
    ]
    options = "\n".join(sections.get("OPTIONS", []))
    return ProviderResponse(
        command=command,
        explanation=options or None,
        alternatives=[a for a in alternatives if a] or None,
    )


def _parse_alternatives(lines: list[str]) -> ProviderResponse:
    commands = [_clean_line(_strip_numbering(line)) for line in lines if line.strip()]
    # Lead-in prose such as "Here are some options:" is not a command.
    commands = [c for c in commands if c and not c.endswith(":")]
    if not commands:
        raise MalformedResponseError("No commands in provider response")
    return ProviderResponse(command=commands[0], alternatives=commands[1:] or None)


def _clean_line(line: str) -> str:
    line = line.strip().strip("`").strip()
    return _PROMPT_RE.sub("", line)


def _strip_numbering(line: str) -> str:
    return _NUMBER_RE.sub("", line).strip()


def _require_command(command: str) -> str:
    if not command:
        raise MalformedResponseError("No command in provider response")
    return command
