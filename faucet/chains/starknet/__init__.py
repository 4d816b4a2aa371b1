"""Starknet backend: ETH and STRK faucet transfers via starknet-py."""

from .client import StarknetClient
from .config import StarknetSecrets, load_config

__all__ = ["StarknetClient", "StarknetSecrets", "load_config"]
