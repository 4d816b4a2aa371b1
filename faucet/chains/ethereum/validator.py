"""Ethereum address and token validation."""

import re

from eth_utils import to_checksum_address

from ..exceptions import (
    EmptyAddressError,
    MalformedAddressError,
    MissingPrefixError,
    UnsupportedTokenError,
)

CHAIN_NAME = "ethereum"

SUPPORTED_TOKENS = frozenset({"ETH"})

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
TX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")


def validate_address(address: str) -> None:
    """
    Validate an Ethereum address format (checksum is not enforced).

    Raises:
        EmptyAddressError: Address is empty
        MissingPrefixError: Address does not start with 0x
        MalformedAddressError: Body is not exactly 40 hex characters
    """
    if not address:
        raise EmptyAddressError("Address cannot be empty", address, CHAIN_NAME)

    if not address.startswith("0x"):
        raise MissingPrefixError("Address must start with 0x", address, CHAIN_NAME)

    if not ADDRESS_PATTERN.match(address):
        raise MalformedAddressError("Invalid Ethereum address format", address, CHAIN_NAME)


def normalize_address(address: str) -> str:
    """Return the EIP-55 checksum form of a valid address."""
    return to_checksum_address(address)


def validate_token(token: str) -> None:
    """
    Validate a token symbol for Ethereum (case-insensitive).

    Raises:
        UnsupportedTokenError: Token is not ETH
    """
    if not token or token.upper() not in SUPPORTED_TOKENS:
        raise UnsupportedTokenError(token, CHAIN_NAME, sorted(SUPPORTED_TOKENS))
