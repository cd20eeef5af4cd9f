"""HTTP transport for the mdsel tools."""

from __future__ import annotations

from typing import Any

from fastapi import Body, FastAPI
from pydantic import BaseModel

from mdsel_claude.config import Config, load_config
from mdsel_claude.executor import Executor, MdselExecutor
from mdsel_claude.tools.mdsel import build_registry


class ToolInfo(BaseModel):
    name: str
    description: str
    inputSchema: dict[str, Any]


class TextBlock(BaseModel):
    type: str = "text"
    text: str


class ToolCallResponse(BaseModel):
    content: list[TextBlock]
    isError: bool


def create_app(
    config: Config | None = None, executor: Executor | None = None
) -> FastAPI:
    """Build the FastAPI app.

    Tool failures are reported in the body (``isError``), never as HTTP errors.
    """
    config = config or load_config()
    registry = build_registry(executor or MdselExecutor.from_config(config))
    app = FastAPI(title="mdsel tool server")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/tools", response_model=list[ToolInfo])
    async def list_tools():
        """List the available tools with their input schemas."""
        return [
            ToolInfo(name=d.name, description=d.description, inputSchema=d.parameters)
            for d in registry.definitions()
        ]

    @app.post("/tools/{name}", response_model=ToolCallResponse)
    async def call_tool(name: str, arguments: dict[str, Any] | None = Body(default=None)):
        """Invoke a tool with a JSON object of arguments."""
        response = await registry.execute(name, arguments)
        return response.to_dict()

    return app
