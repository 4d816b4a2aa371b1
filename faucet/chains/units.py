"""
Token unit conversion.

This module handles:
- Human-readable amounts <-> smallest on-chain unit (fixed point)
- Cairo uint256 encoding as (low, high) 128-bit words
"""

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

from faucet.config.constants import (
    DEFAULT_TOKEN_DECIMALS,
    UINT128_BITS,
    UINT128_MAX,
    UINT256_MAX,
)

from .exceptions import InvalidAmountError

# Enough digits for any uint256 value plus its fractional part
DECIMAL_PRECISION = 100


def to_base_units(
    amount: Decimal | float | int | str,
    decimals: int = DEFAULT_TOKEN_DECIMALS,
) -> int:
    """
    Convert a token amount to the smallest unit (wei-like).

    Floats go through their shortest string form, so 1.5 becomes
    exactly 1500000000000000000. Fractions below one unit are truncated.

    Args:
        amount: Amount in tokens
        decimals: Token decimals

    Returns:
        Integer amount in base units

    Raises:
        InvalidAmountError: If amount is not a finite non-negative number
    """
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError(f"Invalid amount: {amount!r}", amount) from e

    if not value.is_finite() or value < 0:
        raise InvalidAmountError(f"Amount must be a non-negative number: {amount!r}", amount)

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return int((value * Decimal(10**decimals)).to_integral_value(ROUND_DOWN))


def to_decimal(value: int, decimals: int = DEFAULT_TOKEN_DECIMALS) -> Decimal:
    """Convert base units back to a token amount."""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return Decimal(value) / Decimal(10**decimals)


def ensure_uint256(value: int) -> int:
    """
    Check that a base-unit amount fits in uint256.

    Raises:
        InvalidAmountError: If value is not an int, negative or wider than 256 bits
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError(f"Amount must be an integer in base units: {value!r}", value)
    if value < 0 or value > UINT256_MAX:
        raise InvalidAmountError(f"Amount does not fit in uint256: {value}", value)
    return value


def split_uint256(value: int) -> tuple[int, int]:
    """
    Split an integer into Cairo uint256 words.

    Returns:
        (low, high) such that value == low + high * 2**128
    """
    ensure_uint256(value)
    return value & UINT128_MAX, value >> UINT128_BITS


def join_uint256(low: int, high: int) -> int:
    """Reassemble a uint256 from its (low, high) words."""
    return low + (high << UINT128_BITS)
