"""
Tests for the balance tools against a fake JSON-RPC node.
"""

import pytest

from conftest import WALLET_ADDRESS
from monai_agent.constants import TOKEN
from monai_agent.errors import (
    ConfigurationError,
    TokenNotFoundError,
    ToolArgumentsError,
    ToolExecutionError,
)
from monai_agent.tools.token_tools import get_balance_tool, get_token_balance_tool

OTHER_ADDRESS = "0x" + "1" * 40


# =============================================================================
# get_balance
# =============================================================================

class TestGetBalance:

    @pytest.mark.asyncio
    async def test_defaults_to_wallet_context(self, node, wallet):
        node.balances[WALLET_ADDRESS.lower()] = 1_500_000_000_000_000_000

        result = await get_balance_tool.handler({}, wallet, {})

        assert result == "1.5"

    @pytest.mark.asyncio
    async def test_explicit_wallet_argument_wins(self, node, wallet):
        node.balances[OTHER_ADDRESS] = 3 * 10 ** 18

        result = await get_balance_tool.handler({"wallet": OTHER_ADDRESS}, wallet, {})

        assert result == "3"
        assert node.requests[0]["params"][0] == OTHER_ADDRESS

    @pytest.mark.asyncio
    async def test_zero_balance(self, node, wallet):
        assert await get_balance_tool.handler({}, wallet, None) == "0"

    @pytest.mark.asyncio
    async def test_no_address_available(self, node):
        with pytest.raises(ConfigurationError):
            await get_balance_tool.handler({}, None, None)

    @pytest.mark.asyncio
    async def test_rpc_error_wrapped(self, node, wallet):
        node.fail_with = {"code": -32000, "message": "header not found"}

        with pytest.raises(ToolExecutionError, match="Failed to get balance: .*header not found"):
            await get_balance_tool.handler({}, wallet, None)

    @pytest.mark.asyncio
    async def test_rpc_url_override(self, monkeypatch, node, wallet):
        seen = []
        monkeypatch.setattr(
            "monai_agent.tools.token_tools.create_public_client",
            lambda rpc_url=None: seen.append(rpc_url) or node.client(),
        )

        await get_balance_tool.handler({}, wallet, {"rpc_url": "https://custom.rpc"})

        assert seen == ["https://custom.rpc"]


# =============================================================================
# get_token_balance
# =============================================================================

class TestGetTokenBalance:

    @pytest.mark.asyncio
    async def test_formats_with_token_decimals(self, node, wallet):
        monai = TOKEN["MONAI"].lower()
        node.token_balances[(monai, WALLET_ADDRESS.lower())] = 12_340_000_000_000_000_000
        node.decimals[monai] = 18

        result = await get_token_balance_tool.handler({"tokenName": "MONAI"}, wallet, {})

        assert result == "12.34"

    @pytest.mark.asyncio
    async def test_token_name_case_insensitive(self, node, wallet):
        wmon = TOKEN["WMON"].lower()
        node.token_balances[(wmon, WALLET_ADDRESS.lower())] = 5
        node.decimals[wmon] = 1

        assert await get_token_balance_tool.handler({"tokenName": "wMoN"}, wallet, {}) == "0.5"

    @pytest.mark.asyncio
    async def test_unknown_token(self, node, wallet):
        with pytest.raises(TokenNotFoundError) as exc_info:
            await get_token_balance_tool.handler({"tokenName": "unknown"}, wallet, {})

        assert str(exc_info.value) == 'Token "unknown" not found. Available tokens: WMON, MONAI'
        assert node.requests == []

    @pytest.mark.asyncio
    async def test_missing_token_name(self, node, wallet):
        with pytest.raises(ToolArgumentsError, match="Token name is required"):
            await get_token_balance_tool.handler({}, wallet, {})

    @pytest.mark.asyncio
    async def test_non_string_token_name(self, node, wallet):
        with pytest.raises(ToolArgumentsError, match="must be a string"):
            await get_token_balance_tool.handler({"tokenName": 5}, wallet, {})

        assert node.requests == []

    @pytest.mark.asyncio
    async def test_no_address_available(self, node):
        with pytest.raises(ConfigurationError):
            await get_token_balance_tool.handler({"tokenName": "WMON"}, None, {})

    @pytest.mark.asyncio
    async def test_decimals_cached_between_calls(self, node, wallet):
        wmon = TOKEN["WMON"].lower()
        node.token_balances[(wmon, WALLET_ADDRESS.lower())] = 10 ** 18
        node.decimals[wmon] = 18

        await get_token_balance_tool.handler({"tokenName": "WMON"}, wallet, {})
        await get_token_balance_tool.handler({"tokenName": "WMON"}, wallet, {})

        decimals_calls = [
            r for r in node.requests
            if r["method"] == "eth_call" and r["params"][0]["data"] == "0x313ce567"
        ]
        assert len(decimals_calls) == 1

    @pytest.mark.asyncio
    async def test_rpc_error_wrapped(self, node, wallet):
        node.fail_with = {"code": 3, "message": "execution reverted"}

        with pytest.raises(ToolExecutionError, match="Failed to get token balance"):
            await get_token_balance_tool.handler({"tokenName": "WMON"}, wallet, {})
