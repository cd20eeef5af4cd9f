"""Core types shared by the executor and the tool adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ExecutionResult:
    stdout: str = ""
    stderr: str = ""
    exit_code: int | None = 0
    timed_out: bool = False
    duration_ms: int = 0

    @property
    def success(self) -> bool:
        return self.exit_code == 0


@dataclass
class TextContent:
    text: str = ""
    type: str = "text"


@dataclass
class ToolResponse:
    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> ToolResponse:
        return cls(content=[TextContent(text=text)], is_error=is_error)

    @classmethod
    def error(cls, text: str) -> ToolResponse:
        return cls.text(text, is_error=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": [{"type": c.type, "text": c.text} for c in self.content],
            "isError": self.is_error,
        }
