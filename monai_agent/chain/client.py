"""
Chain Clients
=============

Minimal clients for reading from an EVM chain over JSON-RPC.

- PublicClient: read-only RPC access (native balance, eth_call, chain id)
- WalletClient: the caller's wallet context. It carries the account address
  used as the default subject of balance lookups. Signing and broadcasting
  are outside the SDK's scope, so no private key is ever held here.

RPC Notes:
- Uses httpx for async HTTP requests
- Only the handful of methods the tools need are wrapped; request() is
  available for anything else
- ERC20 calls are encoded by hand (4-byte selector + 32-byte padded args)
"""

import re
from dataclasses import dataclass, field
from itertools import count
from typing import Any

import httpx

from monai_agent.chain.chains import MONAD_TESTNET, ChainDefinition
from monai_agent.errors import ConfigurationError, RpcError
from monai_agent.utils.config import get_config
from monai_agent.utils.logger import Logger

logger = Logger("Chain")

_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")

# keccak256("balanceOf(address)")[:4] and keccak256("decimals()")[:4]
ERC20_BALANCE_OF_SELECTOR = "0x70a08231"
ERC20_DECIMALS_SELECTOR = "0x313ce567"


def is_address(value: Any) -> bool:
    """Check whether a value is a 0x-prefixed, 20-byte hex address."""
    return isinstance(value, str) and bool(_ADDRESS_RE.match(value))


def _encode_address(address: str) -> str:
    """ABI-encode an address argument as a 32-byte word (no 0x prefix)."""
    if not is_address(address):
        raise ValueError(f"Invalid address: {address}")
    return address[2:].lower().rjust(64, "0")


def _decode_uint(result: str) -> int:
    """Decode a hex quantity or 32-byte word returned by the node."""
    if not result or result == "0x":
        raise ValueError("Empty result returned by contract call")
    return int(result, 16)


class PublicClient:
    """
    Read-only JSON-RPC client.

    Example:
        async with create_public_client() as client:
            wei = await client.get_balance("0x...")
    """

    def __init__(
        self,
        rpc_url: str,
        chain: ChainDefinition = MONAD_TESTNET,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None
    ):
        """
        Args:
            rpc_url: HTTP(S) endpoint of the node
            chain: Chain the endpoint serves
            timeout: Request timeout in seconds
            http_client: Optional pre-built httpx client (owned by the caller)
        """
        self.rpc_url = rpc_url
        self.chain = chain
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._ids = count(1)

    async def __aenter__(self) -> "PublicClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this client created it."""
        if self._owns_http:
            await self._http.aclose()

    async def request(self, method: str, params: list | None = None) -> Any:
        """
        Send a JSON-RPC request and return its result.

        Args:
            method: RPC method name (e.g., eth_getBalance)
            params: Positional parameters

        Returns:
            The "result" member of the response

        Raises:
            RpcError: If the node answered with an error object
            httpx.HTTPError: On transport failures or non-2xx status
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        logger.debug(f"RPC {method}", {"params": payload["params"]})

        response = await self._http.post(
            self.rpc_url,
            json=payload,
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()
        data = response.json()

        if data.get("error"):
            raise RpcError(method, data["error"])

        return data.get("result")

    async def get_chain_id(self) -> int:
        return int(await self.request("eth_chainId"), 16)

    async def get_balance(self, address: str, block: str = "latest") -> int:
        """Get the native balance of an address, in wei."""
        if not is_address(address):
            raise ValueError(f"Invalid address: {address}")
        result = await self.request("eth_getBalance", [address, block])
        return _decode_uint(result)

    async def call(self, to: str, data: str, block: str = "latest") -> str:
        """Execute a read-only contract call and return the raw hex result."""
        return await self.request("eth_call", [{"to": to, "data": data}, block])

    async def read_erc20_balance(self, token: str, owner: str) -> int:
        """Read balanceOf(owner) on an ERC20 contract."""
        data = ERC20_BALANCE_OF_SELECTOR + _encode_address(owner)
        return _decode_uint(await self.call(token, data))

    async def read_erc20_decimals(self, token: str) -> int:
        """Read decimals() on an ERC20 contract."""
        return _decode_uint(await self.call(token, ERC20_DECIMALS_SELECTOR))


@dataclass(frozen=True)
class WalletAccount:
    """The account a wallet acts for."""
    address: str


@dataclass
class WalletClient:
    """
    The caller's wallet context.

    Shared by reference with every tool call in a session. Tools only read
    from it, so it is safe to share across concurrently running handlers.
    """
    account: WalletAccount | None
    chain: ChainDefinition = field(default=MONAD_TESTNET)

    @property
    def address(self) -> str | None:
        """Shortcut for account.address, None when there is no account."""
        return self.account.address if self.account else None


def create_public_client(rpc_url: str | None = None) -> PublicClient:
    """
    Create a public client for the configured chain.

    Args:
        rpc_url: Optional endpoint overriding MONAD_RPC_URL

    Returns:
        A PublicClient; close it with aclose() or use it with "async with"
    """
    config = get_config()
    return PublicClient(
        rpc_url=rpc_url or config.chain.rpc_url,
        chain=MONAD_TESTNET,
        timeout=config.chain.timeout_seconds,
    )


def create_wallet_client(address: str | None = None) -> WalletClient:
    """
    Create the wallet context for an agent.

    Args:
        address: Account address; falls back to WALLET_ADDRESS

    Returns:
        A WalletClient bound to the address

    Raises:
        ConfigurationError: If no address is available or it is malformed
    """
    address = address or get_config().wallet.address
    if not address:
        raise ConfigurationError("WALLET_ADDRESS environment variable is not set.")
    if not is_address(address):
        raise ConfigurationError(f"Invalid wallet address: {address}")

    logger.debug(f"Wallet client created for {address}")
    return WalletClient(account=WalletAccount(address=address), chain=MONAD_TESTNET)
