"""
MonAI Agent SDK
===============

Build conversational agents that answer questions about wallet and token
balances on the Monad network.

Usage:
    from monai_agent import MonAIAgent, MonAIAgentConfig, create_wallet_client

    agent = MonAIAgent(MonAIAgentConfig(
        wallet_client=create_wallet_client("0x..."),
        prompts="You help users check their Monad balances."
    ))
    print(await agent.send_message("What's my MON balance?"))
"""

from monai_agent.agent import MonAIAgent, MonAIAgentConfig
from monai_agent.chain import (
    MONAD_TESTNET,
    PublicClient,
    WalletClient,
    create_public_client,
    create_wallet_client,
)
from monai_agent.constants import TOKEN
from monai_agent.errors import (
    ConfigurationError,
    MonAIError,
    ResponseFormatError,
    RunFailedError,
    RunStalledError,
    TokenNotFoundError,
    ToolNotFoundError,
)
from monai_agent.tools import Tool, ToolRegistry, init_tools
from monai_agent.utils.logger import Logger, log

__version__ = "1.0.0"

__all__ = [
    "MonAIAgent",
    "MonAIAgentConfig",
    "MONAD_TESTNET",
    "PublicClient",
    "WalletClient",
    "create_public_client",
    "create_wallet_client",
    "TOKEN",
    "ConfigurationError",
    "MonAIError",
    "ResponseFormatError",
    "RunFailedError",
    "RunStalledError",
    "TokenNotFoundError",
    "ToolNotFoundError",
    "Tool",
    "ToolRegistry",
    "init_tools",
    "Logger",
    "log",
]
