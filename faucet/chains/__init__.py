"""
Chain clients.

Each supported network implements the Chain interface from base.py.
Use create_chain() to build a connected client by network name.
"""

from .base import Chain
from .config import ChainConfig
from .exceptions import (
    ChainError,
    ConfigurationError,
    ConfirmationCancelledError,
    ConfirmationTimeoutError,
    InvalidAddressError,
    InvalidAmountError,
    InvalidHashError,
    QueryError,
    SubmissionError,
    SubmissionTimeoutError,
    TransactionRevertedError,
    UnexpectedResponseError,
    UnsupportedTokenError,
    ValidationError,
)
from .models import TransactionConfirmation
from .registry import create_chain, supported_networks
from .units import to_base_units, to_decimal

__all__ = [
    "Chain",
    "ChainConfig",
    "ChainError",
    "ConfigurationError",
    "ConfirmationCancelledError",
    "ConfirmationTimeoutError",
    "InvalidAddressError",
    "InvalidAmountError",
    "InvalidHashError",
    "QueryError",
    "SubmissionError",
    "SubmissionTimeoutError",
    "TransactionConfirmation",
    "TransactionRevertedError",
    "UnexpectedResponseError",
    "UnsupportedTokenError",
    "ValidationError",
    "create_chain",
    "supported_networks",
    "to_base_units",
    "to_decimal",
]
