"""The mdsel_index and mdsel_select tools."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from mdsel_claude.executor import Executor, MdselCommand
from mdsel_claude.tools.registry import ToolDefinition, ToolRegistry
from mdsel_claude.types import ExecutionResult, ToolResponse

INDEX_TOOL = "mdsel_index"
SELECT_TOOL = "mdsel_select"

INDEX_DESCRIPTION = """\
Index Markdown documents to discover available selectors. REQUIRED: Call this \
BEFORE mdsel_select when working with Markdown documents over 200 words. Do NOT \
use the Read tool for large Markdown files - use mdsel_index first to understand \
the document structure, then mdsel_select to retrieve specific sections.

Returns: the mdsel selector inventory as text: headings, blocks (paragraphs, \
code, lists, tables) and word counts for each section."""

SELECT_DESCRIPTION = """\
Retrieve specific content from Markdown documents using selectors. REQUIRED: \
Call mdsel_index first to discover available selectors. Do NOT use the Read \
tool for large Markdown files.

Returns: the matched content as text, with the child selectors available for \
further drilling.

Selector examples:
- h1.0 - first h1 heading
- h2.1-3 - h2 headings 1 through 3
- code.0 - first code block
- h2.0/code.0 - first code block under the first h2
- readme::h2.0 - selector scoped to the "readme" namespace

Usage Pattern:
1. mdsel_index to discover selectors
2. mdsel_select with discovered selectors
3. Drill down with child selectors as needed"""

_FILES_DESCRIPTION = "Paths to the Markdown documents"


class IndexRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    operation: Literal["index"] = "index"
    files: list[str] = Field(min_length=1, description=_FILES_DESCRIPTION)


class SelectRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    operation: Literal["select"] = "select"
    selector: str = Field(
        min_length=1,
        description='Selector identifying the content to retrieve (e.g. "h2.0", "code.0")',
    )
    files: list[str] = Field(min_length=1, description=_FILES_DESCRIPTION)


ToolRequest = Union[IndexRequest, SelectRequest]


def to_response(command: MdselCommand, result: ExecutionResult) -> ToolResponse:
    """Pass CLI output through untouched.

    stdout is returned byte for byte on success, even when it is malformed.
    """
    if result.success:
        return ToolResponse.text(result.stdout)
    return ToolResponse.error(result.stderr or f"mdsel {command.value} command failed")


async def run_request(executor: Executor, request: ToolRequest) -> ToolResponse:
    if isinstance(request, IndexRequest):
        command = MdselCommand.INDEX
        args = list(request.files)
    elif isinstance(request, SelectRequest):
        # selector always precedes the file paths
        command = MdselCommand.SELECT
        args = [request.selector, *request.files]
    else:
        raise TypeError(f"Unsupported request type: {type(request).__name__}")
    result = await executor.execute(command, args)
    return to_response(command, result)


def make_index_tool(executor: Executor) -> ToolDefinition:
    """Create the mdsel_index tool bound to an executor."""

    async def execute(request: IndexRequest) -> ToolResponse:
        return await run_request(executor, request)

    return ToolDefinition(
        name=INDEX_TOOL,
        description=INDEX_DESCRIPTION,
        input_model=IndexRequest,
        execute=execute,
    )


def make_select_tool(executor: Executor) -> ToolDefinition:
    """Create the mdsel_select tool bound to an executor."""

    async def execute(request: SelectRequest) -> ToolResponse:
        return await run_request(executor, request)

    return ToolDefinition(
        name=SELECT_TOOL,
        description=SELECT_DESCRIPTION,
        input_model=SelectRequest,
        execute=execute,
    )


def register_mdsel_tools(registry: ToolRegistry, executor: Executor) -> None:
    """Register both mdsel tools into a registry."""
    for definition in (make_index_tool(executor), make_select_tool(executor)):
        registry.register(definition)


def build_registry(executor: Executor) -> ToolRegistry:
    registry = ToolRegistry()
    register_mdsel_tools(registry, executor)
    return registry
