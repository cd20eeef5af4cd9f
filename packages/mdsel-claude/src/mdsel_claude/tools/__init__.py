"""Tool adapter exposing the mdsel CLI to agents."""

from mdsel_claude.tools.registry import ToolDefinition, ToolRegistry, RegisteredTool
from mdsel_claude.tools.mdsel import (
    INDEX_TOOL,
    SELECT_TOOL,
    IndexRequest,
    SelectRequest,
    ToolRequest,
    build_registry,
    make_index_tool,
    make_select_tool,
    register_mdsel_tools,
    run_request,
)
