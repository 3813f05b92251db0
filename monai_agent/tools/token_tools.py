"""
Token Tools
===========

Balance lookups on the Monad network:
- get_balance: native token (MON) balance of a wallet
- get_token_balance: ERC20 balance of a wallet for a known token

Both tools default to the agent's own wallet when no "wallet" argument is
given. Results are human-readable decimal strings ("1.5").

Error handling:
- Missing wallet address -> ConfigurationError
- Unknown token name -> TokenNotFoundError listing the known tokens
- RPC failures -> ToolExecutionError("Failed to get ...: <cause>")

Tool env configs:
    {"rpc_url": "https://..."} overrides the configured RPC endpoint.
"""

from typing import Any

from monai_agent.chain.client import WalletClient, create_public_client
from monai_agent.constants.tokens import TOKEN, find_token
from monai_agent.errors import (
    ConfigurationError,
    TokenNotFoundError,
    ToolArgumentsError,
    ToolExecutionError,
)
from monai_agent.tools import Tool, ToolRegistry
from monai_agent.utils.helpers import fetch_token_decimals_and_format_amount, format_ether
from monai_agent.utils.logger import Logger

logger = Logger("TokenTools")

ADDRESS_PATTERN = "^0x[a-fA-F0-9]{40}$"


def _resolve_address(args: dict[str, Any], wallet: WalletClient | None) -> str:
    """Pick the explicit wallet argument, falling back to the wallet context."""
    address = args.get("wallet") or (wallet.address if wallet else None)
    if not address:
        raise ConfigurationError(
            "No wallet address provided and no wallet client account available"
        )
    return address


def _rpc_url(tool_env_configs: dict[str, Any] | None) -> str | None:
    if not tool_env_configs:
        return None
    return tool_env_configs.get("rpc_url")


# ==============================================================================
# Tool: Native Balance
# ==============================================================================

async def _get_balance(
    args: dict[str, Any],
    wallet: WalletClient | None = None,
    tool_env_configs: dict[str, Any] | None = None
) -> str:
    """Get the native token balance of a wallet, formatted in whole tokens."""
    address = _resolve_address(args, wallet)
    logger.info(f"Getting native token balance for {address}")

    try:
        async with create_public_client(_rpc_url(tool_env_configs)) as client:
            balance = await client.get_balance(address)
    except Exception as e:
        logger.error("Failed to get balance", e)
        raise ToolExecutionError(f"Failed to get balance: {e}") from e

    formatted = format_ether(balance)
    logger.debug(f"Balance: {formatted}")
    return formatted


get_balance_tool = Tool(
    name="get_balance",
    description=(
        "Get the native token balance of a wallet. "
        "If wallet is not provided, it will use the current wallet provider"
    ),
    parameters={
        "type": "object",
        "properties": {
            "wallet": {
                "type": "string",
                "pattern": ADDRESS_PATTERN,
                "description": "The wallet address to get the balance of. Default is current wallet provider"
            }
        },
        "required": []
    },
    handler=_get_balance
)


# ==============================================================================
# Tool: ERC20 Token Balance
# ==============================================================================

async def _get_token_balance(
    args: dict[str, Any],
    wallet: WalletClient | None = None,
    tool_env_configs: dict[str, Any] | None = None
) -> str:
    """
    Get the balance of a known ERC20 token for a wallet.

    The token is looked up by symbol (case-insensitive) in TOKEN; its
    decimals are read from the contract and cached.
    """
    address = _resolve_address(args, wallet)

    token_name = args.get("tokenName")
    if not token_name:
        raise ToolArgumentsError("Token name is required")
    if not isinstance(token_name, str):
        raise ToolArgumentsError("Token name must be a string")

    found = find_token(token_name)
    if found is None:
        raise TokenNotFoundError(token_name, list(TOKEN.keys()))
    symbol, token_address = found

    logger.info(f"Getting {symbol} balance for {address}")
    logger.debug(f"Using token address: {token_address}")

    try:
        async with create_public_client(_rpc_url(tool_env_configs)) as client:
            raw_balance = await client.read_erc20_balance(token_address, address)
            formatted = await fetch_token_decimals_and_format_amount(
                client, token_address, raw_balance
            )
    except Exception as e:
        logger.error("Failed to get token balance", e)
        raise ToolExecutionError(f"Failed to get token balance: {e}") from e

    logger.debug(f"{symbol} balance: {formatted}")
    return formatted


get_token_balance_tool = Tool(
    name="get_token_balance",
    description="Get the balance of an ERC20 token for a wallet",
    parameters={
        "type": "object",
        "properties": {
            "wallet": {
                "type": "string",
                "pattern": ADDRESS_PATTERN,
                "description": (
                    "The wallet address to get the balance of. "
                    "If wallet is not provided, it will use the current wallet provider"
                )
            },
            "tokenName": {
                "type": "string",
                "description": "The name of the token to get the balance for (e.g., \"WMON\", \"MONAI\")",
                "enum": list(TOKEN.keys())
            }
        },
        "required": ["tokenName"]
    },
    handler=_get_token_balance
)


# ==============================================================================
# Registration
# ==============================================================================

def register_token_tools(registry: ToolRegistry) -> None:
    """Register the token balance tools with a registry."""
    registry.register(get_balance_tool.name, get_balance_tool)
    registry.register(get_token_balance_tool.name, get_token_balance_tool)
    logger.debug("Registered token tools")
