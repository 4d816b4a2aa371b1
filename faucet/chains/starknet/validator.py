"""
Starknet address and token validation.

Addresses are felts written as 0x followed by 1-64 hex digits; the
canonical form is zero-padded to 64 digits (66 characters in total).
"""

import re

from ..exceptions import (
    EmptyAddressError,
    MalformedAddressError,
    MissingPrefixError,
    UnsupportedTokenError,
)

CHAIN_NAME = "starknet"

SUPPORTED_TOKENS = frozenset({"ETH", "STRK"})

NORMALIZED_ADDRESS_LENGTH = 66

# 0x followed by up to 64 hex characters
ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{1,64}$")


def validate_address(address: str) -> None:
    """
    Validate a Starknet address format.

    Raises:
        EmptyAddressError: Address is empty
        MissingPrefixError: Address does not start with 0x
        MalformedAddressError: Body is not 1-64 hex characters
    """
    if not address:
        raise EmptyAddressError("Address cannot be empty", address, CHAIN_NAME)

    if not address.startswith("0x"):
        raise MissingPrefixError("Address must start with 0x", address, CHAIN_NAME)

    if not ADDRESS_PATTERN.match(address):
        raise MalformedAddressError("Invalid Starknet address format", address, CHAIN_NAME)


def is_valid_address(address: str) -> bool:
    """Boolean form of validate_address."""
    try:
        validate_address(address)
    except (EmptyAddressError, MissingPrefixError, MalformedAddressError):
        return False
    return True


def normalize_address(address: str) -> str:
    """
    Normalize a Starknet address to 66 characters (0x + 64 hex).

    Addresses already 66 characters or longer are returned unchanged.

    Examples:
        >>> normalize_address("0x1")
        '0x0000000000000000000000000000000000000000000000000000000000000001'
    """
    if len(address) >= NORMALIZED_ADDRESS_LENGTH:
        return address
    return "0x" + address[2:].rjust(NORMALIZED_ADDRESS_LENGTH - 2, "0")


def validate_token(token: str) -> None:
    """
    Validate a token symbol for Starknet (case-insensitive).

    Raises:
        UnsupportedTokenError: Token is not ETH or STRK
    """
    if not token or token.upper() not in SUPPORTED_TOKENS:
        raise UnsupportedTokenError(token, CHAIN_NAME, sorted(SUPPORTED_TOKENS))
