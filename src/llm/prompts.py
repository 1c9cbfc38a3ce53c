# src/llm/prompts.py — v1
"""Instruction sets and per-mode generation budgets.

Two instruction sets exist: command generation (standard, verbose, alt) and
command explanation (explain). The mode-specific output contract is appended
to the command-generation set so the parser knows what shape to expect.
"""

from __future__ import annotations

from dataclasses import dataclass

from knock.core.models import ContextSnapshot
from knock.llm.models import Message


@dataclass(frozen=True)
class ModeProfile:
    """Generation parameters for one request mode."""

    temperature: float
    max_tokens: int


MODE_PROFILES: dict[str, ModeProfile] = {
    "standard": ModeProfile(temperature=0.2, max_tokens=256),
    "verbose": ModeProfile(temperature=0.2, max_tokens=512),
    "alt": ModeProfile(temperature=0.2, max_tokens=512),
    "explain": ModeProfile(temperature=0.2, max_tokens=768),
}

COMMAND_INSTRUCTIONS = """\
You translate natural-language requests into shell commands.

Rules:
- Target the operating system and shell given in <context>. Prefer
  PowerShell syntax on Windows unless the shell says otherwise.
- Prefer the most common, built-in tool for the task and POSIX syntax where
  portable. Avoid deprecated commands (ip over ifconfig).
- Chain with && for sequential steps, || for fallbacks and | for pipes.
- For destructive operations (rm, format, drop) keep confirmation flags
  unless the request says "force". Prefix system-wide changes with sudo on
  Unix-like systems.
- Never ask clarifying questions; pick the most common interpretation.
- Never execute anything yourself.
"""

EXPLAIN_INSTRUCTIONS = """\
You explain shell commands to a user at a terminal.

Rules:
- Start with one sentence saying what the command does overall.
- Then list each program, flag and operator with a short explanation,
  one per line, prefixed with "- ".
- Mention side effects that modify or delete data.
- Use the operating system and shell given in <context> to resolve
  platform-specific behaviour.
- Plain text only. No markdown headings or code fences.
"""

OUTPUT_CONTRACTS: dict[str, str] = {
    "standard": (
        "Output format: return ONLY the command on a single line. "
        "No explanation, no markdown, no code fences."
    ),
    "verbose": (
        "Output format, exactly these sections:\n"
        "PRIMARY:\n<main command>\n\n"
        "ALTERNATIVES:\n1. <alternative command> — <brief explanation>\n"
        "2. <alternative command> — <brief explanation>\n\n"
        "OPTIONS:\n- <flag>: <what it does>\n- <flag>: <what it does>"
    ),
    "alt": (
        "Output format: return 3 to 5 different commands that accomplish the "
        "request, one per line, best first. No numbering, no explanation, "
        "no code fences."
    ),
}


def system_prompt(mode: str) -> str:
    """Select the instruction set for a mode."""
    if mode == "explain":
        return EXPLAIN_INSTRUCTIONS
    return f"{COMMAND_INSTRUCTIONS}\n{OUTPUT_CONTRACTS[mode]}\n"


def render_context(ctx: ContextSnapshot) -> str:
    """Serialize the environment snapshot as a structured block."""
    return (
        "<context>\n"
        f"os: {ctx.os or 'unknown'}\n"
        f"shell: {ctx.shell or 'unknown'}\n"
        f"cwd: {ctx.cwd or 'unknown'}\n"
        "</context>"
    )


def build_messages(query: str, ctx: ContextSnapshot, mode: str) -> list[Message]:
    """Compose the user turn: context, mode and request."""
    tag = "command" if mode == "explain" else "request"
    content = f"{render_context(ctx)}\n<mode>{mode}</mode>\n<{tag}>{query}</{tag}>"
    return [Message(role="user", content=content)]
