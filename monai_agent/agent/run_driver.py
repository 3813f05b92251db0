"""
Run Driver
==========

Drives one assistant run from creation to a final answer.

Run lifecycle:
    queued ──► in_progress ──┬──► completed ──► read latest message
       ▲                     │
       │                     ├──► requires_action ──► execute tools,
       │                     │                        submit outputs ──┐
       │                     │                                         │
       └─────────────────────┼─────────────────────────────────────────┘
                             │
                             └──► failed / cancelled / expired / ...

The remote runtime does not push status changes, so the driver polls:
while a run is queued or in progress it sleeps for the poll interval and
fetches the run again. It stops fetching as soon as it sees any other
status.
"""

from enum import Enum
from typing import Any

from monai_agent.agent.tools_executor import ToolExecutor
from monai_agent.errors import ResponseFormatError, RunFailedError, RunStalledError
from monai_agent.utils.logger import Logger
from monai_agent.utils.polling import poll_until

logger = Logger("RunDriver")


class RunStatus(str, Enum):
    """Run statuses the driver acts on. Anything else is treated as failed."""
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    COMPLETED = "completed"
    FAILED = "failed"


PENDING_STATUSES = frozenset({RunStatus.QUEUED.value, RunStatus.IN_PROGRESS.value})


def is_pending(run: Any) -> bool:
    """True while the run is queued or in progress."""
    return run.status in PENDING_STATUSES


def requires_tool_outputs(run: Any) -> bool:
    """True when the run is waiting for tool outputs."""
    action = getattr(run, "required_action", None)
    return (
        run.status == RunStatus.REQUIRES_ACTION.value
        and action is not None
        and action.type == "submit_tool_outputs"
    )


class RunDriver:
    """
    Creates runs and drives them to completion.

    Example:
        driver = RunDriver(openai_client, tool_executor, poll_interval=1.0)

        run = await driver.create_run(thread_id, assistant_id)
        answer = await driver.perform_run(run, thread_id)
    """

    def __init__(
        self,
        client: Any,
        tool_executor: ToolExecutor,
        poll_interval: float = 1.0,
        max_wait: float | None = None
    ):
        """
        Args:
            client: AsyncOpenAI client (or anything with the same beta API)
            tool_executor: Handles requires_action rounds
            poll_interval: Seconds between status fetches
            max_wait: Optional limit for each stretch of polling; None waits
                as long as the run stays pending
        """
        self.client = client
        self.tool_executor = tool_executor
        self.poll_interval = poll_interval
        self.max_wait = max_wait

    async def wait_while_pending(self, run: Any, thread_id: str) -> Any:
        """
        Poll a run until it leaves the queued/in_progress states.

        Args:
            run: The run as last seen
            thread_id: Thread the run belongs to

        Returns:
            The first fetched run that is no longer pending
        """
        async def fetch():
            latest = await self.client.beta.threads.runs.retrieve(run.id, thread_id=thread_id)
            logger.debug(f"Run {latest.id} status: {latest.status}")
            return latest

        return await poll_until(
            fetch=fetch,
            is_done=lambda r: not is_pending(r),
            initial=run,
            interval=self.poll_interval,
            max_wait=self.max_wait,
        )

    async def create_run(self, thread_id: str, assistant_id: str) -> Any:
        """
        Start a run and wait for it to leave the pending states.

        Args:
            thread_id: Thread to run on
            assistant_id: Assistant to run

        Returns:
            The run once it is no longer queued or in progress
        """
        logger.info(f"Running for thread {thread_id} with assistant {assistant_id}")

        run = await self.client.beta.threads.runs.create(thread_id, assistant_id=assistant_id)
        logger.debug(f"Created run {run.id} ({run.status})")

        return await self.wait_while_pending(run, thread_id)

    async def perform_run(self, run: Any, thread_id: str) -> str:
        """
        Handle tool calls until the run settles, then extract the answer.

        Args:
            run: A run that is no longer pending
            thread_id: Thread the run belongs to

        Returns:
            The assistant's final text answer

        Raises:
            RunStalledError: If a tool round had nothing to submit
            RunFailedError: If the run ended in any status but completed
            ResponseFormatError: If the final message is not assistant text
        """
        current = await self.wait_while_pending(run, thread_id)

        while requires_tool_outputs(current):
            updated = await self.tool_executor.handle_run_tool_calls(current, thread_id)
            if updated is current:
                raise RunStalledError(
                    f"Run {current.id} requires tool outputs but none could be produced"
                )
            current = await self.wait_while_pending(updated, thread_id)

        logger.debug(f"Run {current.id} settled with status {current.status}")

        if current.status != RunStatus.COMPLETED.value:
            last_error = getattr(current, "last_error", None)
            reason = getattr(last_error, "message", None) if last_error else None
            logger.error(f"Run {current.id} did not complete", data={
                "status": current.status,
                "reason": reason,
            })
            raise RunFailedError(current.id, current.status, reason)

        return await self.extract_answer(thread_id)

    async def extract_answer(self, thread_id: str) -> str:
        """
        Read the newest message in the thread as the run's answer.

        Raises:
            ResponseFormatError: If there is no message, it was not written
                by the assistant, or its first content block is not text
        """
        messages = await self.client.beta.threads.messages.list(thread_id, order="desc", limit=1)
        data = list(messages.data)

        if not data:
            raise ResponseFormatError("Unexpected response format: thread has no messages")

        last = data[0]
        if last.role != "assistant" or not last.content:
            raise ResponseFormatError(
                f"Unexpected response format: latest message is from '{last.role}'"
            )

        block = last.content[0]
        if block.type != "text":
            logger.info(f"Unexpected content block type: {block.type}")
            raise ResponseFormatError(
                f"Unexpected response format: content block of type '{block.type}'"
            )

        return block.text.value
