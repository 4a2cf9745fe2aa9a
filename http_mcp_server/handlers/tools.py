"""
MCP Tool Registry

Holds the tools exposed by the server: each tool is a descriptor (name,
description, input/output schema) paired with the callable that executes it.
The registry is built once at startup and is read-only afterwards.
"""

import asyncio
import functools
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from ..errors import MCPProtocolError, ToolError, ToolNotFoundError
from ..models import ToolCallResult, ToolDescriptor

logger = logging.getLogger(__name__)

ToolOutput = Union[ToolCallResult, Mapping[str, Any]]
ToolInvoker = Callable[[Dict[str, Any]], Union[ToolOutput, Awaitable[ToolOutput]]]


@dataclass(frozen=True)
class RegisteredTool:
    """A tool descriptor together with its invoker."""
    descriptor: ToolDescriptor
    invoker: ToolInvoker

    @property
    def name(self) -> str:
        return self.descriptor.name


async def call_invoker(invoker: Callable[..., Any], *args: Any) -> Any:
    """
    Run a sync or async invoker and return its result.

    Coroutine functions are awaited directly; plain callables run in the
    default executor so the caller can put a deadline on them.
    """
    if inspect.iscoroutinefunction(invoker):
        return await invoker(*args)

    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(None, functools.partial(invoker, *args))
    if inspect.isawaitable(result):
        result = await result
    return result


class ToolRegistry:
    """Name-keyed, ordered, read-only collection of tools."""

    def __init__(self, tools: Iterable[RegisteredTool] = ()) -> None:
        self._tools: Dict[str, RegisteredTool] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            self._tools[tool.name] = tool

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> List[str]:
        return list(self._tools)

    def list_tools(self) -> List[ToolDescriptor]:
        """Snapshot of all tool descriptors in registration order."""
        return [tool.descriptor for tool in self._tools.values()]

    def get(self, name: str) -> Optional[RegisteredTool]:
        return self._tools.get(name)

    async def invoke(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None
    ) -> ToolCallResult:
        """
        Execute a tool call.

        Args:
            name: Registered tool name
            arguments: Tool arguments; None is replaced by an empty mapping
            timeout: Optional deadline in seconds

        Returns:
            ToolCallResult produced by the tool

        Raises:
            ToolNotFoundError: If no tool is registered under ``name``
            MCPProtocolError: If the tool fails, times out, or returns an
                unusable result
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)

        arguments = dict(arguments or {})

        try:
            output = await asyncio.wait_for(call_invoker(tool.invoker, arguments), timeout)
        except asyncio.TimeoutError:
            logger.error(f"Tool '{name}' timed out after {timeout}s")
            raise ToolError(f"tool call timed out after {timeout}s: {name}")
        except MCPProtocolError:
            raise
        except Exception as e:
            logger.error(f"Error executing tool '{name}': {e}", exc_info=True)
            raise ToolError(str(e) or type(e).__name__)

        if isinstance(output, ToolCallResult):
            return output
        try:
            return ToolCallResult.model_validate(output)
        except ValidationError as e:
            logger.error(f"Tool '{name}' returned an invalid result: {e}")
            raise ToolError(f"tool returned an invalid result: {name}")
