"""
Configuration Management
========================

Centralized configuration for the SDK. Environment variables (optionally
loaded from a .env file) are read once, typed, and exposed as frozen
dataclasses.

Everything here has a default except the wallet address, which is only
required by code paths that need a wallet (see
monai_agent.chain.create_wallet_client).

Usage:
    from monai_agent.utils.config import get_config

    config = get_config()
    print(config.openai.model)
    print(config.chain.rpc_url)
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from monai_agent.utils.logger import Logger

logger = Logger("Config")


def _optional(name: str, default: str) -> str:
    """
    Get an optional environment variable with a default.

    Args:
        name: The environment variable name
        default: Default value if not set

    Returns:
        The value or the default
    """
    return os.getenv(name, default)


def _optional_float(name: str, default: float | None) -> float | None:
    """
    Get an optional float environment variable.

    Args:
        name: The environment variable name
        default: Default value if not set or invalid

    Returns:
        The float value or the default
    """
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"{name} is not a valid number, using default: {default}")
        return default


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class OpenAIConfig:
    """OpenAI Assistants configuration."""
    api_key: str | None    # None lets the OpenAI SDK read OPENAI_API_KEY itself
    model: str             # Model the assistant is created with
    temperature: float     # Sampling temperature for created assistants
    assistant_name: str    # Display name for created assistants


@dataclass(frozen=True)
class ChainConfig:
    """Blockchain RPC configuration."""
    rpc_url: str
    timeout_seconds: float


@dataclass(frozen=True)
class WalletConfig:
    """Wallet context configuration (read-only, no keys)."""
    address: str | None


@dataclass(frozen=True)
class AgentConfig:
    """Session and run-driver defaults."""
    assistant_id: str          # Existing assistant to resume, "" to create
    thread_id: str             # Existing thread to resume, "" to create
    poll_interval: float       # Seconds between run status fetches
    max_wait: float | None     # Upper bound on a single poll loop, None = unbounded


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

    Access via:
        config = get_config()
        config.openai.model
        config.agent.poll_interval
    """
    openai: OpenAIConfig
    chain: ChainConfig
    wallet: WalletConfig
    agent: AgentConfig


def load_config() -> Config:
    """
    Load all configuration from the environment.

    Loads .env (searching up from the working directory) without overriding
    variables that are already set, then applies defaults.

    Returns:
        Config: The typed configuration
    """
    load_dotenv()

    # monai_agent.chain imports this module, so import lazily
    from monai_agent.chain.chains import MONAD_TESTNET

    return Config(
        openai=OpenAIConfig(
            api_key=os.getenv("OPENAI_API_KEY"),
            model=_optional("OPENAI_MODEL", "gpt-4"),
            temperature=_optional_float("OPENAI_TEMPERATURE", 0.3),
            assistant_name=_optional("ASSISTANT_NAME", "MonAI Assistant"),
        ),
        chain=ChainConfig(
            rpc_url=_optional("MONAD_RPC_URL", MONAD_TESTNET.rpc_url),
            timeout_seconds=_optional_float("RPC_TIMEOUT_SECONDS", 30.0),
        ),
        wallet=WalletConfig(
            address=os.getenv("WALLET_ADDRESS") or None,
        ),
        agent=AgentConfig(
            assistant_id=_optional("ASSISTANT_ID", ""),
            thread_id=_optional("THREAD_ID", ""),
            poll_interval=_optional_float("AGENT_POLL_INTERVAL", 1.0),
            max_wait=_optional_float("AGENT_MAX_WAIT", None),
        ),
    )


# ==============================================================================
# Singleton
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """
    Get the cached configuration, loading it on first access.

    Returns:
        Config: The SDK configuration
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
