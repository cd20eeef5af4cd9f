"""CLI entry point for the mdsel agent integration."""

from __future__ import annotations

import asyncio
import dataclasses
import sys

import click

from mdsel_claude.config import Config, configure_logging, load_config
from mdsel_claude.hooks import read_hook
from mdsel_claude.word_count import count_words


def _config(mdsel_path: str | None, timeout_ms: int | None) -> Config:
    config = load_config()
    overrides = {}
    if mdsel_path:
        overrides["mdsel_path"] = mdsel_path
    if timeout_ms:
        overrides["timeout_ms"] = timeout_ms
    return dataclasses.replace(config, **overrides)


@click.group()
@click.option("--log-level", default=None, help="Logging level (default from MDSEL_LOG_LEVEL)")
def main(log_level: str | None):
    """mdsel tools and hooks for coding agents."""
    configure_logging(log_level)


@main.command()
@click.option("--mdsel-path", default=None, help="mdsel binary (default from MDSEL_PATH)")
@click.option("--timeout-ms", default=None, type=click.IntRange(min=1), help="CLI timeout in milliseconds")
def serve(mdsel_path: str | None, timeout_ms: int | None):
    """Run the MCP server over stdio."""
    from mdsel_claude.server import serve_stdio

    asyncio.run(serve_stdio(_config(mdsel_path, timeout_ms)))


@main.command("serve-http")
@click.option("--host", default="127.0.0.1", help="Host to bind")
@click.option("--port", default=8000, type=int, help="Port to bind")
@click.option("--mdsel-path", default=None, help="mdsel binary (default from MDSEL_PATH)")
@click.option("--timeout-ms", default=None, type=click.IntRange(min=1), help="CLI timeout in milliseconds")
def serve_http(host: str, port: int, mdsel_path: str | None, timeout_ms: int | None):
    """Start the HTTP tool server."""
    import uvicorn

    from mdsel_claude.web import create_app

    uvicorn.run(create_app(_config(mdsel_path, timeout_ms)), host=host, port=port)


@main.command("read-hook")
def read_hook_cmd():
    """Run the Read PreToolUse hook (JSON on stdin, JSON on stdout)."""
    sys.exit(read_hook.main())


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def count(path: str):
    """Print the word count of a file against the reminder threshold."""
    config = load_config()
    with open(path, encoding="utf-8", errors="replace") as f:
        words = count_words(f.read())
    verdict = "over" if words > config.min_words else "within"
    click.echo(f"{path}: {words} words ({verdict} threshold {config.min_words})")


if __name__ == "__main__":
    main()
