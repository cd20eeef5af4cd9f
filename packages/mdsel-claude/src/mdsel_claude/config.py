"""Environment-backed configuration, loaded once per process."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping

from mdsel_claude.word_count import (
    DEFAULT_MIN_WORDS,
    get_word_threshold,
    positive_int_from_env,
)

PATH_ENV = "MDSEL_PATH"
TIMEOUT_ENV = "MDSEL_TIMEOUT_MS"
LOG_LEVEL_ENV = "MDSEL_LOG_LEVEL"

DEFAULT_MDSEL_PATH = "mdsel"
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_KILL_GRACE_MS = 5000


@dataclass(frozen=True)
class Config:
    """Runtime settings for the tool servers and the read hook."""

    min_words: int = DEFAULT_MIN_WORDS
    mdsel_path: str = DEFAULT_MDSEL_PATH
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    kill_grace_ms: int = DEFAULT_KILL_GRACE_MS


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build a Config from environment variables.

    Invalid or non-positive numbers fall back to their defaults.
    """
    env = os.environ if environ is None else environ
    return Config(
        min_words=get_word_threshold(env),
        mdsel_path=env.get(PATH_ENV) or DEFAULT_MDSEL_PATH,
        timeout_ms=positive_int_from_env(TIMEOUT_ENV, DEFAULT_TIMEOUT_MS, env),
    )


def configure_logging(level: str | None = None) -> None:
    """Send log records to stderr.

    stdout carries protocol data for both the MCP stdio server and the hook,
    so nothing may be logged there.
    """
    name = (level or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
