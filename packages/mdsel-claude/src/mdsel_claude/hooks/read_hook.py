"""PreToolUse hook for the Read tool.

Reads one HookInput envelope from stdin and writes one HookOutput envelope
to stdout. When the target is a Markdown file longer than the configured
word threshold, the output carries a reminder to use the mdsel tools.

The hook never blocks the read: ``continue`` is always true and the process
always exits 0, whatever goes wrong.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import TextIO

from pydantic import BaseModel, ConfigDict, Field

from mdsel_claude.config import Config, configure_logging, load_config
from mdsel_claude.word_count import count_words

logger = logging.getLogger(__name__)

REMINDER_MESSAGE = (
    "This is a Markdown file over the configured size threshold.\n"
    "Use mdsel_index and mdsel_select instead of Read."
)

MARKDOWN_EXTENSIONS = frozenset({".md"})


class ToolInput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    file_path: str


class HookInput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    session_id: str = ""
    hook_event_name: str = ""
    tool_name: str = ""
    tool_input: ToolInput


class HookOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    continue_: bool = Field(default=True, alias="continue")
    system_message: str | None = Field(default=None, alias="systemMessage")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


def is_markdown(file_path: str) -> bool:
    return os.path.splitext(file_path)[1].lower() in MARKDOWN_EXTENSIONS


def evaluate(hook_input: HookInput, config: Config) -> HookOutput:
    """Decide whether the read deserves a reminder."""
    output = HookOutput()
    file_path = hook_input.tool_input.file_path
    if not is_markdown(file_path):
        return output

    try:
        content = Path(file_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        # the Read tool reports file errors itself
        logger.debug("cannot read %s: %s", file_path, e)
        return output

    word_count = count_words(content)
    if word_count > config.min_words:
        logger.debug(
            "%s has %d words (threshold %d)", file_path, word_count, config.min_words
        )
        output.system_message = REMINDER_MESSAGE
    return output


def run_hook(raw: str, config: Config | None = None) -> HookOutput:
    """Process one raw stdin payload. Any failure yields a bare continue."""
    try:
        hook_input = HookInput.model_validate_json(raw)
        return evaluate(hook_input, config or load_config())
    except Exception:
        logger.warning("read hook failed, allowing read", exc_info=True)
        return HookOutput()


def main(stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    """Entry point for the ``mdsel-read-hook`` script."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    try:
        configure_logging()
        output = run_hook(stdin.read())
    except Exception:
        logger.warning("read hook failed before evaluation", exc_info=True)
        output = HookOutput()
    stdout.write(output.to_json() + "\n")
    stdout.flush()
    return 0


def console_main() -> None:
    sys.exit(main())


if __name__ == "__main__":
    console_main()
