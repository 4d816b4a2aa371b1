"""Ethereum backend: native ETH and ERC-20 transfers via web3."""

from .client import EthereumClient
from .config import EthereumSecrets, load_config

__all__ = ["EthereumClient", "EthereumSecrets", "load_config"]
