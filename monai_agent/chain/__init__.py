"""
Chain Access
============

Read-only access to the Monad network:
- ChainDefinition / MONAD_TESTNET: static chain metadata
- PublicClient: JSON-RPC reads (balances, contract calls)
- WalletClient: the caller's wallet context (address only)
"""

from monai_agent.chain.chains import ChainDefinition, MONAD_TESTNET
from monai_agent.chain.client import (
    PublicClient,
    WalletAccount,
    WalletClient,
    create_public_client,
    create_wallet_client,
    is_address,
)

__all__ = [
    "ChainDefinition",
    "MONAD_TESTNET",
    "PublicClient",
    "WalletAccount",
    "WalletClient",
    "create_public_client",
    "create_wallet_client",
    "is_address",
]
