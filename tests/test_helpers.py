"""
Tests for unit formatting, token decimals caching and the polling primitive.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from monai_agent.errors import PollTimeoutError
from monai_agent.utils.helpers import (
    ZERO_ADDRESS,
    fetch_token_decimals,
    fetch_token_decimals_and_format_amount,
    fetch_token_decimals_and_parse_amount,
    format_ether,
    format_units,
    parse_units,
)
from monai_agent.utils.polling import poll_until

TOKEN_ADDRESS = "0x" + "ab" * 20


# =============================================================================
# Unit conversion
# =============================================================================

class TestFormatUnits:

    @pytest.mark.parametrize("value,decimals,expected", [
        (0, 18, "0"),
        (1, 18, "0.000000000000000001"),
        (10 ** 18, 18, "1"),
        (1_500_000_000_000_000_000, 18, "1.5"),
        (123_456, 3, "123.456"),
        (120_000, 4, "12"),
        (42, 0, "42"),
        (-2_500_000, 6, "-2.5"),
    ])
    def test_format_units(self, value, decimals, expected):
        assert format_units(value, decimals) == expected

    def test_format_ether(self):
        assert format_ether(2 * 10 ** 18 + 5 * 10 ** 17) == "2.5"


class TestParseUnits:

    @pytest.mark.parametrize("amount,decimals,expected", [
        ("1.5", 18, 1_500_000_000_000_000_000),
        (2, 6, 2_000_000),
        (Decimal("0.000001"), 6, 1),
        ("0.0000001", 6, 0),
        ("123.456789", 3, 123_456),
    ])
    def test_parse_units(self, amount, decimals, expected):
        assert parse_units(amount, decimals) == expected

    @pytest.mark.parametrize("amount", ["abc", "NaN", "Infinity"])
    def test_invalid_amount(self, amount):
        with pytest.raises(ValueError):
            parse_units(amount, 18)


# =============================================================================
# Token decimals
# =============================================================================

class TestTokenDecimals:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", ZERO_ADDRESS])
    async def test_native_token_has_18_decimals(self, token):
        client = MagicMock()
        client.read_erc20_decimals = AsyncMock()

        assert await fetch_token_decimals(client, token) == 18
        client.read_erc20_decimals.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cached_per_token(self):
        client = MagicMock()
        client.read_erc20_decimals = AsyncMock(return_value=6)

        assert await fetch_token_decimals(client, TOKEN_ADDRESS) == 6
        assert await fetch_token_decimals(client, TOKEN_ADDRESS.upper().replace("0X", "0x")) == 6
        client.read_erc20_decimals.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_read_failure_defaults_to_18(self):
        client = MagicMock()
        client.read_erc20_decimals = AsyncMock(side_effect=RuntimeError("revert"))

        assert await fetch_token_decimals(client, TOKEN_ADDRESS) == 18
        assert await fetch_token_decimals(client, TOKEN_ADDRESS) == 18
        client.read_erc20_decimals.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_format_and_parse_with_decimals(self):
        client = MagicMock()
        client.read_erc20_decimals = AsyncMock(return_value=6)

        assert await fetch_token_decimals_and_format_amount(client, TOKEN_ADDRESS, 1_250_000) == "1.25"
        assert await fetch_token_decimals_and_parse_amount(client, TOKEN_ADDRESS, "1.25") == 1_250_000


# =============================================================================
# Polling
# =============================================================================

class TestPollUntil:

    @pytest.mark.asyncio
    async def test_returns_initial_without_fetching(self):
        fetch = AsyncMock()

        result = await poll_until(fetch, lambda v: v == "done", initial="done", interval=0)

        assert result == "done"
        fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fetches_until_done(self):
        fetch = AsyncMock(side_effect=["queued", "in_progress", "done", "never"])

        result = await poll_until(fetch, lambda v: v == "done", interval=0)

        assert result == "done"
        assert fetch.await_count == 3

    @pytest.mark.asyncio
    async def test_max_wait(self):
        fetch = AsyncMock(return_value="queued")

        with pytest.raises(PollTimeoutError):
            await poll_until(fetch, lambda v: False, interval=0.01, max_wait=0.03)

    @pytest.mark.asyncio
    async def test_timeout_is_builtin_timeout_error(self):
        fetch = AsyncMock(return_value="queued")

        with pytest.raises(TimeoutError):
            await poll_until(fetch, lambda v: False, initial="queued", interval=0, max_wait=0)
