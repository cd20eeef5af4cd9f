"""Agent hooks that steer reads of large Markdown files toward mdsel."""

from mdsel_claude.hooks.read_hook import (
    REMINDER_MESSAGE,
    HookInput,
    HookOutput,
    evaluate,
    run_hook,
)
