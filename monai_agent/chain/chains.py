"""Chain definitions the SDK knows how to talk to."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ChainDefinition:
    """Static description of an EVM chain."""
    id: int
    name: str
    native_symbol: str
    native_decimals: int
    rpc_url: str
    explorer_url: str | None = None


MONAD_TESTNET = ChainDefinition(
    id=10143,
    name="Monad Testnet",
    native_symbol="MON",
    native_decimals=18,
    rpc_url="https://testnet-rpc.monad.xyz",
    explorer_url="https://testnet.monadexplorer.com",
)
