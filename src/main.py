# src/main.py — v2
"""CLI entry point — ask, explain, history, config commands.

Usage:
    knock ask <request...> [--verbose | --alt] [--no-cache]
    knock explain [--] <command...>
    knock history [filter] [-n N] [--clear]
    knock config

stdout carries only results; diagnostics go to stderr and the log file.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import uuid
from typing import Callable, TypeVar

from knock.cache.base_cache_store import BaseCacheStore
from knock.cache.cache_factory import create_cache_store
from knock.config.provider_config import load_provider_config
from knock.config.settings import Settings, load_settings
from knock.core.errors import ConfigError, GatewayError, InputError, StoreError
from knock.history.base_history_store import BaseHistoryStore
from knock.history.history_factory import create_history_store
from knock.llm.client_factory import create_llm_client
from knock.llm.gateway import ProviderGateway
from knock.llm.retry import RetryExhausted, default_retry_configs, with_retry
from knock.logging.context import set_invocation_context
from knock.logging.logger import setup_logging
from knock.pipeline.orchestrator import CommandPipeline, PipelineResult
from knock.storage.layout import StorageLayout
from knock.version import __version__

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

DEFAULT_HISTORY_SHOWN = 20

StoreT = TypeVar("StoreT", BaseCacheStore, BaseHistoryStore)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_USAGE

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    layout = StorageLayout.at(settings.home)
    _setup_logging(settings, layout, args.debug)
    set_invocation_context(
        uuid.uuid4().hex[:12], mode=getattr(args, "mode", None)
    )

    try:
        return asyncio.run(args.func(args, settings, layout))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED
    except (InputError, ConfigError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE
    except RetryExhausted as exc:
        print(f"Error: {exc.last_error}", file=sys.stderr)
        return EXIT_FAILURE
    except (GatewayError, StoreError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="knock",
        description=f"knock v{__version__} — natural language to shell commands",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- ask ---
    p_ask = subparsers.add_parser(
        "ask", help="Translate a request into a shell command",
    )
    p_ask.add_argument("query", nargs="+", help="What you want to do")
    modes = p_ask.add_mutually_exclusive_group()
    modes.add_argument(
        "-v", "--verbose", dest="mode", action="store_const", const="verbose",
        help="Show alternatives and relevant options",
    )
    modes.add_argument(
        "-a", "--alt", dest="mode", action="store_const", const="alt",
        help="List several alternative commands",
    )
    p_ask.add_argument(
        "--no-cache", action="store_true",
        help="Ignore cached answers (fresh answers are still cached)",
    )
    p_ask.add_argument(
        "--retries", type=int, default=None,
        help="Retry network/rate-limit failures N times (default: MAX_RETRIES)",
    )
    p_ask.set_defaults(func=_cmd_ask, mode="standard")

    # --- explain ---
    p_explain = subparsers.add_parser(
        "explain", help="Explain what a shell command does",
    )
    p_explain.add_argument("shell_command", nargs="+", help="Command to explain")
    p_explain.add_argument("--no-cache", action="store_true")
    p_explain.add_argument("--retries", type=int, default=None)
    p_explain.set_defaults(func=_cmd_ask, mode="explain")

    # --- history ---
    p_history = subparsers.add_parser(
        "history", help="Show or search past translations",
    )
    p_history.add_argument("filter", nargs="?", default="", help="Substring to search for")
    p_history.add_argument(
        "-n", "--limit", type=int, default=DEFAULT_HISTORY_SHOWN,
        help=f"Entries to show (default: {DEFAULT_HISTORY_SHOWN})",
    )
    p_history.add_argument("--clear", action="store_true", help="Delete all history")
    p_history.set_defaults(func=_cmd_history)

    # --- config ---
    p_config = subparsers.add_parser(
        "config", help="Show the resolved configuration",
    )
    p_config.set_defaults(func=_cmd_config)

    return parser


async def _cmd_ask(
    args: argparse.Namespace, settings: Settings, layout: StorageLayout
) -> int:
    """Run the request pipeline for ask/explain."""
    words = args.shell_command if args.mode == "explain" else args.query
    query = " ".join(words)

    config = load_provider_config(layout.config_file)
    set_invocation_context(
        uuid.uuid4().hex[:12], mode=args.mode, provider=config.provider
    )
    gateway = ProviderGateway(create_llm_client(config, settings))

    cache = _open_store(create_cache_store, settings, layout) if settings.cache_enabled else None
    history = _open_store(create_history_store, settings, layout)
    try:
        pipeline = CommandPipeline(
            gateway, cache=cache, history=history, use_cache=not args.no_cache,
        )
        retries = settings.max_retries if args.retries is None else args.retries
        result = await with_retry(
            pipeline.run, query, args.mode,
            retry_configs=default_retry_configs(max(retries, 0)),
        )
    finally:
        for store in (cache, history):
            if store is not None:
                store.close()

    _print_result(result, args.mode)
    return EXIT_OK


async def _cmd_history(
    args: argparse.Namespace, settings: Settings, layout: StorageLayout
) -> int:
    """List, search or clear the history log."""
    history = create_history_store(settings, layout)
    try:
        if args.clear:
            await history.clear()
            print("History cleared.")
            return EXIT_OK
        if args.filter:
            entries = await history.search(args.filter, limit=args.limit)
        else:
            entries = await history.recent(args.limit)
    finally:
        history.close()

    if not entries:
        print("No history found.")
        return EXIT_OK

    for entry in entries:
        print(entry.query)
        print(f"  {entry.command}")
    return EXIT_OK


async def _cmd_config(
    args: argparse.Namespace, settings: Settings, layout: StorageLayout
) -> int:
    """Print the resolved provider configuration."""
    config = load_provider_config(layout.config_file)
    print(f"root:      {layout.root}")
    print(f"provider:  {config.provider}")
    print(f"model:     {config.model}")
    if config.provider == "ollama":
        print(f"ollama:    {config.resolved_ollama_url}")
    else:
        present = "set" if settings.credential(config.provider) else "missing"
        print(f"api key:   {present}")
    print(f"cache:     {settings.cache_backend} ({'on' if settings.cache_enabled else 'off'})")
    print(f"history:   {settings.history_limit} entries max")
    return EXIT_OK


def _open_store(
    factory: Callable[[Settings, StorageLayout], StoreT],
    settings: Settings,
    layout: StorageLayout,
) -> StoreT | None:
    """Open a store, degrading to None when it cannot be opened."""
    try:
        return factory(settings, layout)
    except StoreError as exc:
        logger.warning("Continuing without store: %s", exc)
        return None


def _print_result(result: PipelineResult, mode: str) -> None:
    """Write the pipeline result to stdout."""
    response = result.response
    if mode == "explain":
        print(response.command)
        print()
        print(response.explanation or "")
        return

    print(response.command)
    if mode == "alt":
        for alternative in response.alternatives or []:
            print(alternative)
        return

    if mode == "verbose":
        if response.alternatives:
            print()
            print("Alternatives:")
            for i, alternative in enumerate(response.alternatives, 1):
                print(f"  {i}. {alternative}")
        if response.explanation:
            print()
            print(response.explanation)


def _setup_logging(settings: Settings, layout: StorageLayout, debug: bool) -> None:
    """Configure logging for CLI usage."""
    log_file = settings.log_file or layout.log_file
    setup_logging(
        level="DEBUG" if debug else settings.log_level,
        log_format=settings.log_format,
        log_file=str(log_file),
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
