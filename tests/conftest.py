"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment so settings classes validate without a .env file
os.environ.setdefault("STARKNET_RPC_URL", "https://starknet-sepolia.example.org/rpc/v0_7")
os.environ.setdefault("STARKNET_PRIVATE_KEY", "0x1234")
os.environ.setdefault(
    "STARKNET_ADDRESS", "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
)
os.environ.setdefault("ETHEREUM_RPC_URL", "https://ethereum-sepolia.example.org")
os.environ.setdefault(
    "ETHEREUM_PRIVATE_KEY", "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
)
os.environ.setdefault("ETHEREUM_ADDRESS", "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from decimal import Decimal

import pytest
from pydantic import SecretStr

from faucet.chains.config import ChainConfig, TokenPolicy

STRK_CONTRACT = "0x04718f5a0fc34cc1af16a1cdee98ffb20c31f5cd61d6ab07201858f4287c938d"
STARKNET_ETH_CONTRACT = "0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7"


@pytest.fixture
def sample_starknet_address():
    """Sample valid full-length Starknet address."""
    return "0x0" + "a" * 63


@pytest.fixture
def sample_ethereum_address():
    """Sample valid Ethereum address (lower case)."""
    return "0x742d35cc6634c0532925a3b844bc9e7595f0beb0"


@pytest.fixture
def sample_transaction_hash():
    """Sample transaction hash for testing."""
    return "0x1234567890abcdef1234567890abcdef1234567890abcdef1234567890abcdef"


@pytest.fixture
def starknet_config():
    """Starknet Sepolia config with both supported tokens."""
    return ChainConfig(
        network="sepolia",
        rpc_url="https://starknet-sepolia.example.org/rpc/v0_7",
        private_key=SecretStr("0x1234"),
        signer_address="0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef",
        tokens={
            "STRK": TokenPolicy(
                contract_address=STRK_CONTRACT,
                drip_amount=Decimal("10"),
                max_per_hour=1000,
                max_per_day=10000,
            ),
            "ETH": TokenPolicy(
                contract_address=STARKNET_ETH_CONTRACT,
                drip_amount=Decimal("0.01"),
                max_per_hour=1,
                max_per_day=10,
            ),
        },
        min_balance_protect_pct=10,
    )
