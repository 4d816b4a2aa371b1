"""
Shared fixtures for unit tests.

This module provides node-level test doubles:
- Mock Starknet node and account
- Mock Web3 instance with an eth namespace
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from starknet_py.net.client_models import (
    TransactionExecutionStatus,
    TransactionFinalityStatus,
)


@pytest.fixture
def mock_node():
    """
    Mock Starknet FullNodeClient.

    Returns:
        AsyncMock: Node with get_block_number, call_contract and
            get_transaction_receipt coroutines
    """
    node = AsyncMock()
    node.get_block_number = AsyncMock(return_value=123456)
    node.call_contract = AsyncMock(return_value=[0, 0])
    node.get_transaction_receipt = AsyncMock()
    return node


@pytest.fixture
def mock_account():
    """Mock Starknet account whose execute_v3 returns a fixed hash."""
    account = AsyncMock()
    account.execute_v3 = AsyncMock(return_value=MagicMock(transaction_hash=0xABC123))
    return account


@pytest.fixture
def make_receipt():
    """Factory for Starknet receipt doubles."""

    def _make(
        execution_status=TransactionExecutionStatus.SUCCEEDED,
        finality_status=TransactionFinalityStatus.ACCEPTED_ON_L2,
        block_number=777,
        revert_reason=None,
    ):
        return MagicMock(
            execution_status=execution_status,
            finality_status=finality_status,
            block_number=block_number,
            revert_reason=revert_reason,
        )

    return _make


@pytest.fixture
def mock_w3():
    """Mock synchronous Web3 instance."""
    w3 = MagicMock()
    w3.is_connected.return_value = True
    w3.eth.get_transaction_count.return_value = 7
    w3.eth.gas_price = 2_000_000_000
    w3.eth.chain_id = 11155111
    w3.eth.get_balance.return_value = 5 * 10**18
    w3.eth.send_raw_transaction.return_value = b"\x12" * 32
    return w3
