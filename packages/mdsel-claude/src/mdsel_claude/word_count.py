"""Mechanical word counting and the reminder threshold."""

from __future__ import annotations

import os
import re
from typing import Mapping

MIN_WORDS_ENV = "MDSEL_MIN_WORDS"
DEFAULT_MIN_WORDS = 200

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")
_WHITESPACE = re.compile(r"\s+")


def count_words(content: str) -> int:
    """Count whitespace-delimited tokens.

    No Markdown awareness: fences, list markers and the like are ordinary
    tokens. Empty or whitespace-only input counts as 0.
    """
    trimmed = content.strip()
    if not trimmed:
        return 0
    return len([t for t in _WHITESPACE.split(trimmed) if t])


def parse_leading_int(value: str) -> int | None:
    """Parse the integer prefix of ``value`` the way C's ``atoi`` would.

    ``"200abc"`` gives 200 and ``"00500"`` gives 500. Returns None when the
    string does not start with digits.
    """
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(1))


def positive_int_from_env(
    name: str, default: int, environ: Mapping[str, str] | None = None
) -> int:
    """Read a positive integer from the environment, falling back to ``default``."""
    env = os.environ if environ is None else environ
    raw = env.get(name)
    if not raw:
        return default
    value = parse_leading_int(raw)
    if value is None or value < 1:
        return default
    return value


def get_word_threshold(environ: Mapping[str, str] | None = None) -> int:
    """Word count above which a Markdown read triggers the reminder."""
    return positive_int_from_env(MIN_WORDS_ENV, DEFAULT_MIN_WORDS, environ)
