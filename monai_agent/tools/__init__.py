"""
Tools System
============

Tools are local capabilities the remote assistant can ask the agent to run
in the middle of a run (e.g. "look up this wallet's balance").

Each tool has:
- A name, unique within a registry
- A description and JSON Schema for its parameters, sent to the assistant
  when it is created
- An async handler that does the work

Handler contract:
    async def handler(args: dict, wallet: WalletClient | None,
                      tool_env_configs: dict | None) -> Any

    The return value is stringified and handed back to the assistant. To
    signal failure, raise; the executor reports it as "Error: <message>".
    Handlers run concurrently with each other and must treat the wallet and
    config mapping as read-only.

This module provides:
- Tool dataclass for defining tools
- ToolRegistry for managing available tools
- init_tools() to build a registry with the built-in tools
"""

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from monai_agent.utils.logger import Logger

if TYPE_CHECKING:
    from monai_agent.chain.client import WalletClient

logger = Logger("Tools")

ToolHandler = Callable[
    [dict[str, Any], "WalletClient | None", "dict[str, Any] | None"],
    Awaitable[Any],
]


@dataclass(frozen=True)
class Tool:
    """
    Definition of a callable tool.

    Attributes:
        name: Identifier the assistant uses to call the tool
        description: What the tool does (shown to the assistant)
        parameters: JSON Schema for the arguments
        handler: Async function that runs the tool

    Example:
        async def _echo(args, wallet=None, tool_env_configs=None):
            return args["text"]

        echo_tool = Tool(
            name="echo",
            description="Repeat the given text",
            parameters={
                "type": "object",
                "properties": {"text": {"type": "string"}},
                "required": ["text"]
            },
            handler=_echo
        )
    """
    name: str
    description: str
    parameters: dict
    handler: ToolHandler

    def __post_init__(self):
        if not inspect.iscoroutinefunction(self.handler):
            raise TypeError(f"Handler for tool \"{self.name}\" must be an async function")

    @property
    def required_parameters(self) -> list[str]:
        return list(self.parameters.get("required", []))

    def to_openai_function(self) -> dict:
        """
        Convert to the OpenAI function tool format.

        Returns:
            Dict in the format expected by the Assistants API
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters
            }
        }


class ToolRegistry:
    """
    Registry of the tools an agent can offer to its assistant.

    A registry is an ordinary object: build one at startup, register tools on
    it, and hand it to the agent. Registration is last-write-wins and is not
    synchronized, so do it before the agent starts handling messages.

    Example:
        registry = init_tools()
        registry.register("echo", echo_tool)

        tool = registry.get("echo")
        functions = registry.get_openai_functions()
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._tools: dict[str, Tool] = {}

    def register(self, name: str, tool: Tool) -> None:
        """
        Register a tool under a name, replacing any existing entry.

        Args:
            name: Key the tool is looked up by
            tool: The tool to register
        """
        if name in self._tools:
            logger.warning(f"Overwriting registered tool: {name}")
        if name != tool.name:
            logger.warning(f"Tool '{tool.name}' registered under different name '{name}'")

        self._tools[name] = tool
        logger.debug(f"Registered tool: {name}")

    def get(self, name: str) -> Tool | None:
        """
        Get a tool by name.

        Args:
            name: The tool name

        Returns:
            The tool, or None if not found
        """
        return self._tools.get(name)

    def list_names(self) -> list[str]:
        """Get list of all tool names."""
        return list(self._tools.keys())

    def get_openai_functions(self) -> list[dict]:
        """
        Get all tool definitions in OpenAI function format.

        Returns:
            List of definitions for assistants.create(tools=...)
        """
        return [tool.to_openai_function() for tool in self._tools.values()]

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    # Keep below every method annotated with the builtin list.
    def list(self) -> dict[str, Tool]:
        """Get a snapshot of the full name -> tool mapping."""
        return dict(self._tools)


def init_tools() -> ToolRegistry:
    """
    Create a registry with all built-in tools registered.

    Returns:
        A new ToolRegistry
    """
    from monai_agent.tools.token_tools import register_token_tools

    registry = ToolRegistry()
    register_token_tools(registry)

    logger.info(f"Registered {len(registry)} tools")
    return registry


__all__ = [
    "Tool",
    "ToolHandler",
    "ToolRegistry",
    "init_tools",
]
