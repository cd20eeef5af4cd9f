"""Tool registry for managing the exposed tools."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, ValidationError

from mdsel_claude.types import ToolResponse

logger = logging.getLogger(__name__)


@dataclass
class ToolDefinition:
    name: str
    description: str
    input_model: type[BaseModel]
    execute: Callable[..., Any] | None = None

    @property
    def parameters(self) -> dict[str, Any]:
        """JSON schema advertised to clients, without the internal tag field."""
        schema = self.input_model.model_json_schema()
        schema.get("properties", {}).pop("operation", None)
        schema.pop("title", None)
        return schema


@dataclass
class RegisteredTool:
    """A tool registered in the registry."""

    definition: ToolDefinition
    executor: Callable[..., Any]


def format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "Input validation error: " + ", ".join(parts)


class ToolRegistry:
    """Registry for tool definitions and executors."""

    def __init__(self) -> None:
        self._tools: dict[str, RegisteredTool] = {}

    def register(
        self,
        definition: ToolDefinition,
        executor: Callable[..., Any] | None = None,
    ) -> None:
        """Register a tool. Latest registration wins on name collision."""
        run = executor or definition.execute
        if run is None:
            raise ValueError(f"Tool {definition.name} has no executor")
        self._tools[definition.name] = RegisteredTool(definition=definition, executor=run)

    def get(self, name: str) -> RegisteredTool | None:
        """Get a registered tool by name."""
        return self._tools.get(name)

    def definitions(self) -> list[ToolDefinition]:
        """Return all tool definitions (for tools/list)."""
        return [t.definition for t in self._tools.values()]

    def names(self) -> list[str]:
        """Return all registered tool names."""
        return list(self._tools.keys())

    async def execute(self, name: str, arguments: dict[str, Any] | None) -> ToolResponse:
        """Validate arguments and execute a tool by name.

        Always returns a ToolResponse; validation failures and unexpected
        executor errors come back with ``is_error`` set.
        """
        tool = self._tools.get(name)
        if tool is None:
            return ToolResponse.error(f"Unknown tool: {name}")

        try:
            request = tool.definition.input_model.model_validate(
                arguments if arguments is not None else {}
            )
        except ValidationError as e:
            return ToolResponse.error(format_validation_error(e))

        try:
            if inspect.iscoroutinefunction(tool.executor):
                result = await tool.executor(request)
            else:
                result = tool.executor(request)
        except Exception as e:
            logger.exception("tool %s failed", name)
            return ToolResponse.error(f"Tool error: {e}")

        if isinstance(result, ToolResponse):
            return result
        return ToolResponse.text(str(result))

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
