"""
Agent Core
==========

MonAIAgent is the object applications talk to. It owns one conversation
with a hosted OpenAI assistant and answers messages using the registered
tools.

Message flow:
    send_message(text)
         │
         ▼
    Initialized? ── no ──► resolve assistant + thread
         │
         ▼
    Append user message to thread
         │
         ▼
    Create run, poll until it settles
         │
         ▼
    ┌─── requires_action? ───┐
    │                        │
    Yes                      No
    │                        │
    ▼                        ▼
    Execute tools,      completed? ── no ──► RunFailedError
    submit outputs           │
    │                       yes
    └── poll again           ▼
                        Latest assistant message text

Resolution rules:
- Assistant: retrieve the configured assistant_id; if that fails for any
  reason (including no ID at all), create a new assistant declaring every
  registered tool.
- Thread: retrieve the configured thread_id if one was given, otherwise
  create a new thread.

Concurrency:
    Calls to send_message on one agent are serialized. Use one agent per
    conversation to talk to several threads at once.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any

from openai import AsyncOpenAI

from monai_agent.agent.run_driver import RunDriver
from monai_agent.agent.session import AgentSession, Resolution, ResolutionOrigin
from monai_agent.agent.tools_executor import ToolExecutor
from monai_agent.chain.client import WalletClient, create_wallet_client
from monai_agent.tools import ToolRegistry, init_tools
from monai_agent.utils.config import get_config
from monai_agent.utils.logger import Logger

logger = Logger("Agent")


@dataclass
class MonAIAgentConfig:
    """
    Options for a MonAIAgent. Unset fields fall back to get_config().

    Attributes:
        wallet_client: Wallet context; created from WALLET_ADDRESS if omitted
        openai_config: Keyword arguments for AsyncOpenAI (api_key, base_url, ...)
        tool_env_configs: Passed through to every tool handler
        prompts: Instructions for a newly created assistant
        assistant_id: Existing assistant to use
        thread_id: Existing thread to continue
        model: Model for a newly created assistant
        temperature: Temperature for a newly created assistant
        assistant_name: Name for a newly created assistant
        poll_interval: Seconds between run status fetches
        max_wait: Optional limit on each stretch of polling
    """
    wallet_client: WalletClient | None = None
    openai_config: dict[str, Any] = field(default_factory=dict)
    tool_env_configs: dict[str, Any] = field(default_factory=dict)
    prompts: str = ""
    assistant_id: str | None = None
    thread_id: str | None = None
    model: str | None = None
    temperature: float | None = None
    assistant_name: str | None = None
    poll_interval: float | None = None
    max_wait: float | None = None


class MonAIAgent:
    """
    A conversational agent that can look up wallet and token balances.

    Example:
        agent = MonAIAgent(MonAIAgentConfig(
            wallet_client=create_wallet_client("0x..."),
            prompts="You are a helpful Monad wallet assistant."
        ))

        answer = await agent.send_message("What's my balance?")
        print(answer)
    """

    def __init__(
        self,
        config: MonAIAgentConfig | None = None,
        registry: ToolRegistry | None = None,
        openai_client: Any = None
    ):
        """
        Initialize the agent. No remote calls happen until initialize() or
        the first send_message().

        Args:
            config: Agent options
            registry: Tools to offer; defaults to the built-in tools
            openai_client: Pre-built AsyncOpenAI client
        """
        config = config or MonAIAgentConfig()
        defaults = get_config()

        self.config = config
        self._registry = registry if registry is not None else init_tools()

        if openai_client is None:
            openai_kwargs = dict(config.openai_config)
            if defaults.openai.api_key and "api_key" not in openai_kwargs:
                openai_kwargs["api_key"] = defaults.openai.api_key
            openai_client = AsyncOpenAI(**openai_kwargs)
        self.openai = openai_client

        self.model = config.model or defaults.openai.model
        self.temperature = (
            config.temperature if config.temperature is not None
            else defaults.openai.temperature
        )
        self.assistant_name = config.assistant_name or defaults.openai.assistant_name

        self.session = AgentSession(
            wallet=config.wallet_client or create_wallet_client(),
            instructions=config.prompts,
            tool_env_configs=config.tool_env_configs,
            assistant_id=config.assistant_id if config.assistant_id is not None else defaults.agent.assistant_id,
            thread_id=config.thread_id if config.thread_id is not None else defaults.agent.thread_id,
        )

        poll_interval = (
            config.poll_interval if config.poll_interval is not None
            else defaults.agent.poll_interval
        )
        max_wait = config.max_wait if config.max_wait is not None else defaults.agent.max_wait

        self.tool_executor = ToolExecutor(
            self.openai, self._registry, self.session, poll_interval=poll_interval
        )
        self.run_driver = RunDriver(
            self.openai, self.tool_executor, poll_interval=poll_interval, max_wait=max_wait
        )

        self._init_lock = asyncio.Lock()
        self._message_lock = asyncio.Lock()

        logger.info(f"Agent created for wallet {self.session.wallet.address}")

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    async def initialize(self) -> None:
        """
        Resolve the assistant and the thread.

        Safe to call more than once; after the first success it does nothing.

        Raises:
            openai.OpenAIError: If the assistant cannot be created or the
                thread cannot be retrieved/created
        """
        async with self._init_lock:
            if self.session.initialized:
                logger.info("Agent already initialized")
                return

            assistant = await self.resolve_assistant()
            thread = await self.resolve_thread()

            self.session.apply_assistant(assistant)
            self.session.apply_thread(thread)
            self.session.mark_initialized()

            logger.info("Agent initialized", {
                "assistant_id": assistant.identity,
                "assistant": assistant.origin.value,
                "thread_id": thread.identity,
                "thread": thread.origin.value,
            })

    async def resolve_assistant(self) -> Resolution:
        """
        Retrieve the configured assistant, or create one if that fails.

        Returns:
            Resolution saying which assistant to use and how it was obtained
        """
        assistant_id = self.session.assistant_id
        if assistant_id:
            try:
                assistant = await self.openai.beta.assistants.retrieve(assistant_id)
                return Resolution(assistant.id, ResolutionOrigin.RETRIEVED, assistant)
            except Exception as e:
                logger.warning(f"Could not retrieve assistant {assistant_id}, creating a new one: {e}")

        assistant = await self.openai.beta.assistants.create(
            model=self.model,
            temperature=self.temperature,
            name=self.assistant_name,
            instructions=self.session.instructions,
            tools=self._registry.get_openai_functions(),
        )
        logger.info(f"Created assistant {assistant.id}")
        return Resolution(assistant.id, ResolutionOrigin.CREATED, assistant)

    async def resolve_thread(self) -> Resolution:
        """
        Retrieve the configured thread, or create one if none was given.

        Returns:
            Resolution saying which thread to use and how it was obtained
        """
        thread_id = self.session.thread_id
        if thread_id:
            thread = await self.openai.beta.threads.retrieve(thread_id)
            return Resolution(thread.id, ResolutionOrigin.RETRIEVED, thread)

        thread = await self.openai.beta.threads.create()
        logger.info(f"Created thread {thread.id}")
        return Resolution(thread.id, ResolutionOrigin.CREATED, thread)

    # ==========================================================================
    # Messaging
    # ==========================================================================

    async def send_message(self, message: str) -> str:
        """
        Send a message and get the assistant's answer.

        Initializes the agent first if needed.

        Args:
            message: The user's message

        Returns:
            The assistant's text answer

        Raises:
            RunFailedError: If the run ended without completing
            RunStalledError: If the run asked only for unknown tools
            ResponseFormatError: If the answer is not assistant text
            openai.OpenAIError: On any Assistants API failure
        """
        if not self.session.initialized:
            await self.initialize()

        async with self._message_lock:
            thread_id = self.session.thread_id

            logger.info(
                f"Sending message: {message} for wallet {self.session.wallet.address}"
            )
            await self.openai.beta.threads.messages.create(
                thread_id,
                role="user",
                content=message,
            )

            run = await self.run_driver.create_run(thread_id, self.session.assistant_id)
            answer = await self.run_driver.perform_run(run, thread_id)

            logger.info(f"Generated response ({len(answer)} chars)")
            return answer

    # ==========================================================================
    # Accessors
    # ==========================================================================

    @property
    def assistant(self) -> Any:
        return self.session.assistant

    @property
    def thread(self) -> Any:
        return self.session.thread

    @property
    def assistant_id(self) -> str:
        return self.session.assistant_id

    @property
    def thread_id(self) -> str:
        return self.session.thread_id

    @property
    def wallet_client(self) -> WalletClient:
        return self.session.wallet

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def is_initialized(self) -> bool:
        return self.session.initialized
