"""
Helpers
=======

Unit conversion and token metadata helpers shared by the balance tools.

On-chain amounts are integers in the token's smallest unit. These helpers
convert between that and human-readable decimal strings:

    format_units(1_500_000_000_000_000_000, 18)  -> "1.5"
    parse_units("1.5", 18)                       -> 1500000000000000000

Token decimals are fetched once per token address and cached for the life
of the process.
"""

from decimal import Decimal, localcontext
from typing import TYPE_CHECKING

from monai_agent.utils.logger import Logger

if TYPE_CHECKING:
    from monai_agent.chain.client import PublicClient

logger = Logger("Helpers")

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
NATIVE_DECIMALS = 18


def format_units(value: int, decimals: int) -> str:
    """
    Format an integer amount in smallest units as a decimal string.

    Trailing zeros are dropped, and whole amounts have no fractional part
    ("1", not "1.0").

    Args:
        value: Amount in the smallest unit (wei for native tokens)
        decimals: Number of decimals the token uses

    Returns:
        The human-readable amount
    """
    negative = value < 0
    digits = str(abs(value)).rjust(decimals + 1, "0")

    whole = digits[:-decimals] if decimals else digits
    fraction = digits[-decimals:].rstrip("0") if decimals else ""

    text = f"{whole}.{fraction}" if fraction else whole
    return f"-{text}" if negative else text


def format_ether(value: int) -> str:
    """Format a wei amount using the native 18 decimals."""
    return format_units(value, NATIVE_DECIMALS)


def parse_units(amount: str | int | float | Decimal, decimals: int) -> int:
    """
    Parse a human-readable amount into the token's smallest unit.

    Digits beyond the token's precision are truncated.

    Args:
        amount: The amount, e.g. "1.5" or 2
        decimals: Number of decimals the token uses

    Returns:
        The integer amount in smallest units

    Raises:
        ValueError: If amount is not a number
    """
    try:
        parsed = Decimal(str(amount))
    except ArithmeticError as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e

    if not parsed.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")

    with localcontext() as ctx:
        ctx.prec = max(78, len(parsed.as_tuple().digits) + decimals)
        return int(parsed.scaleb(decimals))


# ==============================================================================
# Token decimals
# ==============================================================================

_token_decimals_cache: dict[str, int] = {}


async def fetch_token_decimals(client: "PublicClient", token: str | None) -> int:
    """
    Get the number of decimals a token uses.

    Native tokens (empty or zero address) always use 18. ERC20 decimals are
    read from the contract once and cached. A failed read is logged and
    cached as 18.

    Args:
        client: Public client used to read the contract
        token: Token contract address

    Returns:
        The token's decimals
    """
    if not token or token.lower() == ZERO_ADDRESS:
        return NATIVE_DECIMALS

    key = token.lower()
    if key not in _token_decimals_cache:
        try:
            _token_decimals_cache[key] = await client.read_erc20_decimals(token)
        except Exception as e:
            logger.error(f"Failed to fetch decimals for token {token}", e)
            _token_decimals_cache[key] = NATIVE_DECIMALS

    return _token_decimals_cache[key]


async def fetch_token_decimals_and_format_amount(
    client: "PublicClient",
    token: str | None,
    amount: int
) -> str:
    """Format a raw token amount using the token's decimals."""
    decimals = await fetch_token_decimals(client, token)
    return format_units(amount, decimals)


async def fetch_token_decimals_and_parse_amount(
    client: "PublicClient",
    token: str | None,
    amount: str | int | float | Decimal
) -> int:
    """Parse a human-readable amount into the token's smallest unit."""
    decimals = await fetch_token_decimals(client, token)
    return parse_units(amount, decimals)


def clear_token_decimals_cache() -> None:
    """Forget all cached token decimals."""
    _token_decimals_cache.clear()
