"""ERC20 tokens the balance tools know about, keyed by symbol."""

TOKEN: dict[str, str] = {
    "WMON": "0x760AfE86e5de5fa0Ee542fc7B7B713e1c5425701",
    "MONAI": "0x7348fac1b35be27b0b636f0881afc9449ec54ba5",
}


def find_token(name: str) -> tuple[str, str] | None:
    """
    Look up a token by symbol, ignoring case.

    Returns:
        (canonical symbol, contract address), or None if unknown
    """
    for symbol, address in TOKEN.items():
        if symbol.lower() == name.lower():
            return symbol, address
    return None
