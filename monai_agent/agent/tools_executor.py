"""
Tool Executor
=============

Runs the tools a run asks for and hands the results back to the assistant.

When a run stops in "requires_action", it carries a list of tool calls.
The executor:
1. Parses the calls from the run
2. Executes all of them concurrently against one registry snapshot
3. Turns each result (or failure) into a text output keyed by call ID
4. Submits every output in one batch, which resumes the run

Failure isolation:
    A handler that raises never affects its siblings. Its output becomes
    "Error: <message>" so the assistant can explain the problem in plain
    language. A call naming an unknown tool produces no output at all; it
    is logged and left out of the batch.
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any

from monai_agent.agent.session import AgentSession
from monai_agent.errors import ToolArgumentsError, ToolNotFoundError
from monai_agent.tools import Tool, ToolRegistry
from monai_agent.utils.logger import Logger

logger = Logger("ToolExecutor")


@dataclass
class ToolCall:
    """
    A tool call requested by a run.

    Attributes:
        id: The tool call ID (for matching outputs)
        name: The tool name
        arguments: Raw JSON arguments as sent by the assistant
    """
    id: str
    name: str
    arguments: str


@dataclass
class ToolCallResult:
    """
    Output of one executed tool call.

    Attributes:
        tool_call_id: The original tool call ID
        name: The tool name
        output: Text handed back to the assistant
        success: False when output is an "Error: ..." message
    """
    tool_call_id: str
    name: str
    output: str
    success: bool = True

    def to_openai_output(self) -> dict:
        """Format as an entry of submit_tool_outputs(tool_outputs=...)."""
        return {
            "tool_call_id": self.tool_call_id,
            "output": self.output
        }


def _parse_arguments(raw: str | None, tool: Tool) -> dict[str, Any]:
    """
    Parse a call's JSON arguments and check required parameters.

    Raises:
        ToolArgumentsError: If the JSON is invalid, not an object, or a
            required parameter is missing
    """
    if raw is None or not raw.strip():
        args: Any = {}
    else:
        try:
            args = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ToolArgumentsError(f"Invalid JSON arguments: {e}") from e

    if not isinstance(args, dict):
        raise ToolArgumentsError("Tool arguments must be a JSON object")

    missing = [name for name in tool.required_parameters if args.get(name) is None]
    if missing:
        raise ToolArgumentsError(f"Missing required argument(s): {', '.join(missing)}")

    return args


class ToolExecutor:
    """
    Executes a run's tool calls and submits their outputs.

    Example:
        executor = ToolExecutor(openai_client, registry, session)

        # Inside the run loop
        if run.status == "requires_action":
            run = await executor.handle_run_tool_calls(run, session.thread_id)
    """

    def __init__(
        self,
        client: Any,
        registry: ToolRegistry,
        session: AgentSession,
        poll_interval: float = 1.0
    ):
        """
        Args:
            client: AsyncOpenAI client (or anything with the same beta API)
            registry: Tools available for dispatch
            session: Supplies the wallet context and tool configs
            poll_interval: Seconds between polls while outputs are processed
        """
        self.client = client
        self.registry = registry
        self.session = session
        self.poll_interval = poll_interval

    def parse_tool_calls(self, run: Any) -> list[ToolCall]:
        """
        Extract the pending tool calls from a run.

        Calls repeating an already-seen ID are dropped so each ID is
        answered at most once.

        Args:
            run: A run in the requires_action state

        Returns:
            List of ToolCall objects (empty if the run requires nothing)
        """
        action = getattr(run, "required_action", None)
        submit = getattr(action, "submit_tool_outputs", None) if action else None
        raw_calls = getattr(submit, "tool_calls", None) or []

        tool_calls: list[ToolCall] = []
        seen: set[str] = set()

        for tc in raw_calls:
            if tc.id in seen:
                logger.warning(f"Dropping duplicate tool call {tc.id} ({tc.function.name})")
                continue
            seen.add(tc.id)
            tool_calls.append(ToolCall(
                id=tc.id,
                name=tc.function.name,
                arguments=tc.function.arguments
            ))

        logger.debug(f"Parsed {len(tool_calls)} tool calls")
        return tool_calls

    async def execute_one(
        self,
        tool_call: ToolCall,
        tools: dict[str, Tool]
    ) -> ToolCallResult | None:
        """
        Execute a single tool call.

        Args:
            tool_call: The call to execute
            tools: Registry snapshot for this dispatch round

        Returns:
            The call's result, or None if the tool is not registered
        """
        tool = tools.get(tool_call.name)
        if tool is None:
            err = ToolNotFoundError(tool_call.name, list(tools))
            logger.error(str(err), err, data={"tool_call_id": tool_call.id})
            return None

        logger.info(f"Executing tool: {tool_call.name}")

        try:
            args = _parse_arguments(tool_call.arguments, tool)
            output = await tool.handler(args, self.session.wallet, self.session.tool_env_configs)
        except Exception as e:
            logger.warning(f"Tool {tool_call.name} failed: {e}")
            return ToolCallResult(
                tool_call_id=tool_call.id,
                name=tool_call.name,
                output=f"Error: {e}",
                success=False
            )

        logger.debug(f"Tool {tool_call.name} succeeded")
        return ToolCallResult(
            tool_call_id=tool_call.id,
            name=tool_call.name,
            output=str(output)
        )

    async def execute_parallel(self, tool_calls: list[ToolCall]) -> list[ToolCallResult]:
        """
        Execute tool calls concurrently and wait for all of them to settle.

        Args:
            tool_calls: Calls to execute

        Returns:
            Results for every call that produced an output, in no
            particular relation to completion order
        """
        tools = self.registry.list()

        settled = await asyncio.gather(
            *(self.execute_one(tc, tools) for tc in tool_calls),
            return_exceptions=True
        )

        results: list[ToolCallResult] = []
        for tool_call, outcome in zip(tool_calls, settled):
            if isinstance(outcome, Exception):
                logger.error(f"Tool call {tool_call.id} failed", outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            elif outcome is not None:
                results.append(outcome)

        return results

    async def handle_run_tool_calls(self, run: Any, thread_id: str) -> Any:
        """
        Run every tool call a run requires and submit the outputs.

        Args:
            run: A run in the requires_action state
            thread_id: Thread the run belongs to

        Returns:
            The updated run after submission, or the same run unchanged when
            there was nothing to submit
        """
        tool_calls = self.parse_tool_calls(run)
        if not tool_calls:
            return run

        results = await self.execute_parallel(tool_calls)

        if not results:
            logger.info(f"No valid tool outputs to submit for run {run.id}")
            return run

        logger.info(
            f"Submitting {len(results)} tool output(s) for run {run.id}",
            {"failed": [r.tool_call_id for r in results if not r.success]}
        )
        return await self.client.beta.threads.runs.submit_tool_outputs_and_poll(
            thread_id=thread_id,
            run_id=run.id,
            tool_outputs=[r.to_openai_output() for r in results],
            poll_interval_ms=int(self.poll_interval * 1000)
        )

    def get_available_tools(self) -> list[str]:
        """Get list of available tool names."""
        return self.registry.list_names()

    def has_tool(self, name: str) -> bool:
        """Check if a tool is available."""
        return self.registry.get(name) is not None
