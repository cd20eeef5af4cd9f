"""Selector-based Markdown access for coding agents, backed by the mdsel CLI."""

__version__ = "1.0.0"

from mdsel_claude.types import ExecutionResult, TextContent, ToolResponse
from mdsel_claude.config import Config, load_config
from mdsel_claude.word_count import count_words, get_word_threshold, parse_leading_int
from mdsel_claude.executor import MdselCommand, MdselExecutor, execute
from mdsel_claude.tools import ToolRegistry, build_registry
