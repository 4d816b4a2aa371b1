"""
Chain - Abstract interface for all blockchain backends.

============================================================
PURPOSE
============================================================
Every network (Starknet, Ethereum, ...) implements this contract with
its own address format, token table and transaction encoding.

DESIGN PRINCIPLES:
- Validation happens before any network access
- One network round trip per transfer/balance call, no internal retry
- Confirmation waits are cancellable at every poll tick
- Clients are read-only after construction

============================================================
"""

import asyncio
from abc import ABC, abstractmethod

from .config import ChainConfig
from .models import TransactionConfirmation


class Chain(ABC):
    """
    Abstract base class for chain clients.

    Subclasses must implement the network operations (transfer,
    get_balance, wait_for_confirmation) and the pure helpers
    (address/token validation, naming, explorer links).
    """

    # ─────────────────────────────────────────────────────────────
    # Network operations
    # ─────────────────────────────────────────────────────────────

    @abstractmethod
    async def transfer(
        self,
        recipient: str,
        token: str,
        amount: int,
        timeout: float | None = None,
    ) -> str:
        """
        Transfer tokens to a recipient.

        Not idempotent: every call submits a new transaction.

        Args:
            recipient: Recipient address
            token: Token symbol (case-insensitive)
            amount: Amount in base units
            timeout: Bound on the submission round trip

        Returns:
            Transaction hash

        Raises:
            InvalidAddressError: Recipient failed validation
            UnsupportedTokenError: Token not resolved on this network
            InvalidAmountError: Amount out of range
            SubmissionError: Node rejected the transaction
        """

    @abstractmethod
    async def get_balance(
        self,
        address: str,
        token: str,
        timeout: float | None = None,
    ) -> int:
        """
        Get the token balance of an address in base units.

        Raises:
            InvalidAddressError: Address failed validation
            UnsupportedTokenError: Token not resolved on this network
            QueryError: RPC failure or unexpected result shape
        """

    @abstractmethod
    async def wait_for_confirmation(
        self,
        tx_hash: str,
        cancel_event: asyncio.Event | None = None,
        *,
        poll_interval: float | None = None,
        timeout: float | None = None,
    ) -> TransactionConfirmation:
        """
        Block until the transaction receipt is observable.

        Raises:
            InvalidHashError: Hash is malformed
            ConfirmationCancelledError: cancel_event was set (or timeout elapsed)
            TransactionRevertedError: Receipt reports a reverted execution
        """

    # ─────────────────────────────────────────────────────────────
    # Pure helpers (no network access)
    # ─────────────────────────────────────────────────────────────

    @abstractmethod
    def validate_address(self, address: str) -> None:
        """Raise InvalidAddressError if the address is malformed."""

    @abstractmethod
    def normalize_address(self, address: str) -> str:
        """Return the canonical form of an address."""

    @abstractmethod
    def validate_token(self, token: str) -> None:
        """Raise UnsupportedTokenError if the token is not supported."""

    @abstractmethod
    def supported_tokens(self) -> frozenset[str]:
        """Token symbols supported by this network."""

    @abstractmethod
    def explorer_url(self, tx_hash: str) -> str:
        """Block explorer URL for a transaction."""

    @property
    @abstractmethod
    def chain_name(self) -> str:
        """Chain name (e.g. "starknet", "ethereum")."""

    @property
    @abstractmethod
    def network_name(self) -> str:
        """Network name (e.g. "sepolia", "mainnet")."""

    @property
    @abstractmethod
    def config(self) -> ChainConfig:
        """Configuration the client was built from."""

    # ─────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────

    async def close(self) -> None:
        """Release client resources."""

    async def __aenter__(self) -> "Chain":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(chain={self.chain_name}, network={self.network_name})>"
