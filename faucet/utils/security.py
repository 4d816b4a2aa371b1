"""
Log redaction for on-chain identifiers.

Faucet logs name the recipient and the transaction of every drip; only
enough of each hex string is kept to correlate lines with an explorer.
Private keys never reach these helpers and are never logged.
"""

REDACTED = "***"

# (leading, trailing) characters kept, the leading part includes "0x"
ADDRESS_KEEP = (6, 4)
TX_HASH_KEEP = (10, 6)


def redact_hex(value: str | None, keep: tuple[int, int]) -> str:
    """
    Keep the head and tail of a hex identifier and elide the middle.

    Values too short to hide anything are fully redacted.

    Examples:
        >>> redact_hex("0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7", (6, 4))
        '0x049d...4dc7'
        >>> redact_hex("0x1", (6, 4))
        '***'
    """
    head, tail = keep
    if not value or len(value) < head + tail:
        return REDACTED
    return f"{value[:head]}...{value[-tail:]}"


def mask_address(address: str | None) -> str:
    """Shorten a recipient or signer address for log lines."""
    return redact_hex(address, ADDRESS_KEEP)


def mask_tx_hash(tx_hash: str | None) -> str:
    """Shorten a transaction hash (Starknet felt or EVM hash) for log lines."""
    return redact_hex(tx_hash, TX_HASH_KEEP)
