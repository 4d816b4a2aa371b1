"""
Starknet chain client.

This module handles:
- Account setup from the faucet private key
- ERC-20 transfers encoded as Cairo uint256 (low, high) calldata
- balanceOf queries decoded back into integers
- Receipt polling until the transaction outcome is observable
"""

import asyncio
from types import MappingProxyType

from loguru import logger
from starknet_py.hash.selector import get_selector_from_name
from starknet_py.net.account.account import Account
from starknet_py.net.client_models import Call, TransactionExecutionStatus
from starknet_py.net.full_node_client import FullNodeClient
from starknet_py.net.models import StarknetChainId
from starknet_py.net.signer.stark_curve_signer import KeyPair

from faucet.config.constants import (
    BLOCKCHAIN_CONNECT_TIMEOUT,
    BLOCKCHAIN_TIMEOUT,
    CONFIRMATION_POLL_INTERVAL,
)
from faucet.utils.security import mask_address, mask_tx_hash

from ..base import Chain
from ..config import ChainConfig
from ..exceptions import (
    ConfigurationError,
    InvalidHashError,
    QueryError,
    SubmissionError,
    SubmissionTimeoutError,
    TransactionRevertedError,
    UnexpectedResponseError,
    UnsupportedTokenError,
)
from ..models import TransactionConfirmation
from ..polling import wait_for_receipt, with_timeout
from ..units import join_uint256, split_uint256
from . import validator
from .config import DEFAULT_EXPLORER_URLS
from .validator import ADDRESS_PATTERN, CHAIN_NAME

TRANSFER_SELECTOR = get_selector_from_name("transfer")
BALANCE_OF_SELECTOR = get_selector_from_name("balanceOf")

CHAIN_IDS = MappingProxyType({
    "mainnet": StarknetChainId.MAINNET,
    "sepolia": StarknetChainId.SEPOLIA,
})


def parse_felt(value: str) -> int:
    """
    Parse a 0x-prefixed hex string into a felt.

    Raises:
        ValueError: If the string is not 1-64 hex digits after 0x
    """
    if not value or not ADDRESS_PATTERN.match(value):
        raise ValueError(f"not a hex felt: {value!r}")
    return int(value, 16)


def parse_private_key(value: str) -> int:
    """Parse a private key given as 0x-hex or decimal."""
    key = int(value, 0)
    if key <= 0:
        raise ValueError("private key must be positive")
    return key


class StarknetClient(Chain):
    """
    Chain implementation for Starknet.

    Owns the faucet account, the node connection and the token address
    table. None of these change after construction, so one client may
    serve concurrent calls.

    Example:
        config = load_config()
        async with await StarknetClient.connect(config) as client:
            tx_hash = await client.transfer(recipient, "STRK", 10**18)
            await client.wait_for_confirmation(tx_hash)
    """

    def __init__(
        self,
        config: ChainConfig,
        node: FullNodeClient,
        account: Account,
    ) -> None:
        """
        Initialize client from already-built node and account objects.

        Args:
            config: Chain configuration
            node: Node RPC client
            account: Signing account

        Raises:
            ConfigurationError: If a configured token address is malformed
        """
        self._config = config
        self._node = node
        self._account = account
        self._token_addresses = MappingProxyType(self._resolve_token_addresses(config))

    @staticmethod
    def _resolve_token_addresses(config: ChainConfig) -> dict[str, int]:
        token_addresses: dict[str, int] = {}
        for symbol in sorted(validator.SUPPORTED_TOKENS):
            address = config.get_token_address(symbol)
            if not address:
                continue
            try:
                token_addresses[symbol] = parse_felt(address)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid {symbol} token address", CHAIN_NAME, f"tokens.{symbol}", e
                ) from e
        return token_addresses

    @classmethod
    async def connect(
        cls,
        config: ChainConfig,
        node: FullNodeClient | None = None,
    ) -> "StarknetClient":
        """
        Create a client: connect to the node and set up the faucet account.

        Args:
            config: Chain configuration
            node: Optional pre-built node client (defaults to config.rpc_url)

        Returns:
            Ready StarknetClient

        Raises:
            ConfigurationError: Unreachable endpoint, malformed key, signer
                address or token address
        """
        chain_id = CHAIN_IDS.get(config.network)
        if chain_id is None:
            raise ConfigurationError(
                f"Unknown Starknet network: {config.network}", CHAIN_NAME, "chain_id"
            )

        try:
            private_key = parse_private_key(config.private_key.get_secret_value())
        except ValueError:
            # The original error may echo the key
            raise ConfigurationError(
                "Invalid private key format", CHAIN_NAME, "STARKNET_PRIVATE_KEY"
            ) from None

        try:
            signer_address = parse_felt(config.signer_address)
        except ValueError as e:
            raise ConfigurationError(
                "Invalid account address", CHAIN_NAME, "STARKNET_ADDRESS", e
            ) from e

        if node is None:
            node = FullNodeClient(node_url=config.rpc_url)

        try:
            block_number = await with_timeout(
                node.get_block_number(),
                BLOCKCHAIN_CONNECT_TIMEOUT,
                "Starknet connect",
            )
        except Exception as e:
            logger.error(f"Starknet RPC endpoint unreachable: {e}")
            raise ConfigurationError(
                "Failed to connect to Starknet RPC endpoint", CHAIN_NAME, "STARKNET_RPC_URL", e
            ) from e

        account = Account(
            address=signer_address,
            client=node,
            key_pair=KeyPair.from_private_key(private_key),
            chain=chain_id,
        )

        client = cls(config, node, account)
        logger.info(
            f"Starknet client ready: network={config.network}, block={block_number}, "
            f"signer={mask_address(config.signer_address)}, "
            f"tokens={sorted(client._token_addresses)}"
        )
        return client

    # ─────────────────────────────────────────────────────────────
    # Network operations
    # ─────────────────────────────────────────────────────────────

    async def transfer(
        self,
        recipient: str,
        token: str,
        amount: int,
        timeout: float | None = BLOCKCHAIN_TIMEOUT,
    ) -> str:
        """
        Transfer tokens to a recipient.

        Calls the token contract's transfer entry point with calldata
        [recipient, low, high] as a single invoke transaction.
        A timeout raises SubmissionTimeoutError; the invoke may still have
        been accepted, so check before resubmitting.
        """
        self.validate_address(recipient)
        token_address = self._resolve_token(token)
        low, high = split_uint256(amount)

        call = Call(
            to_addr=token_address,
            selector=TRANSFER_SELECTOR,
            calldata=[int(recipient, 16), low, high],
        )

        try:
            response = await with_timeout(
                self._account.execute_v3(calls=[call], auto_estimate=True),
                timeout,
                "Starknet transfer",
            )
        except TimeoutError as e:
            # The invoke may already have reached the node
            logger.error(
                f"Starknet transfer of {amount} {token.upper()} to "
                f"{mask_address(recipient)} timed out, outcome unknown"
            )
            raise SubmissionTimeoutError(timeout, CHAIN_NAME, e) from e
        except Exception as e:
            logger.error(
                f"Starknet transfer of {amount} {token.upper()} to "
                f"{mask_address(recipient)} failed: {e}"
            )
            raise SubmissionError(
                f"Transaction failed: {e}", CHAIN_NAME, "transfer", e
            ) from e

        tx_hash = hex(response.transaction_hash)
        logger.info(
            f"Starknet transfer sent: {amount} {token.upper()} to {mask_address(recipient)}, "
            f"hash: {mask_tx_hash(tx_hash)}"
        )
        return tx_hash

    async def get_balance(
        self,
        address: str,
        token: str,
        timeout: float | None = BLOCKCHAIN_TIMEOUT,
    ) -> int:
        """Get the token balance via balanceOf against the latest block."""
        self.validate_address(address)
        token_address = self._resolve_token(token)

        call = Call(
            to_addr=token_address,
            selector=BALANCE_OF_SELECTOR,
            calldata=[int(address, 16)],
        )

        try:
            result = await with_timeout(
                self._node.call_contract(call, block_number="latest"),
                timeout,
                "Starknet balanceOf",
            )
        except Exception as e:
            logger.error(f"Get {token.upper()} balance failed for {mask_address(address)}: {e}")
            raise QueryError(
                f"Failed to get balance: {e}", CHAIN_NAME, "get_balance", e
            ) from e

        # uint256 comes back as (low, high)
        if len(result) < 2:
            raise UnexpectedResponseError(
                f"Unexpected balance result length: {len(result)}",
                CHAIN_NAME,
                "get_balance",
                result,
            )

        return join_uint256(result[0], result[1])

    async def wait_for_confirmation(
        self,
        tx_hash: str,
        cancel_event: asyncio.Event | None = None,
        *,
        poll_interval: float | None = None,
        timeout: float | None = None,
    ) -> TransactionConfirmation:
        """
        Poll for the transaction receipt until it is available.

        Lookup failures (including "transaction not found" while the
        transaction is still pending) are retried on the next tick.
        """
        tx_hash_felt = self._parse_tx_hash(tx_hash)

        receipt = await wait_for_receipt(
            lambda: self._node.get_transaction_receipt(tx_hash_felt),
            tx_hash,
            chain=CHAIN_NAME,
            interval=poll_interval or CONFIRMATION_POLL_INTERVAL,
            cancel_event=cancel_event,
            timeout=timeout,
        )

        if receipt.execution_status == TransactionExecutionStatus.REVERTED:
            logger.warning(
                f"Starknet transaction {mask_tx_hash(tx_hash)} reverted: {receipt.revert_reason}"
            )
            raise TransactionRevertedError(tx_hash, CHAIN_NAME, receipt.revert_reason)

        confirmation = TransactionConfirmation(
            tx_hash=tx_hash,
            block_number=receipt.block_number,
            finality_status=_status_label(receipt.finality_status),
            execution_status=_status_label(receipt.execution_status),
        )
        logger.info(
            f"Starknet transaction confirmed: {mask_tx_hash(tx_hash)} "
            f"({confirmation.finality_status})"
        )
        return confirmation

    # ─────────────────────────────────────────────────────────────
    # Pure helpers
    # ─────────────────────────────────────────────────────────────

    def validate_address(self, address: str) -> None:
        validator.validate_address(address)

    def normalize_address(self, address: str) -> str:
        return validator.normalize_address(address)

    def validate_token(self, token: str) -> None:
        validator.validate_token(token)

    def supported_tokens(self) -> frozenset[str]:
        return validator.SUPPORTED_TOKENS

    def explorer_url(self, tx_hash: str) -> str:
        if self._config.explorer_url:
            return self._config.explorer_url + tx_hash
        base = DEFAULT_EXPLORER_URLS.get(self._config.network, DEFAULT_EXPLORER_URLS["sepolia"])
        return base + tx_hash

    @property
    def chain_name(self) -> str:
        return CHAIN_NAME

    @property
    def network_name(self) -> str:
        return self._config.network

    @property
    def config(self) -> ChainConfig:
        return self._config

    def _resolve_token(self, token: str) -> int:
        """Validate the symbol and return its contract address."""
        self.validate_token(token)
        token_address = self._token_addresses.get(token.upper())
        if token_address is None:
            raise UnsupportedTokenError(token, CHAIN_NAME, sorted(self._token_addresses))
        return token_address

    def _parse_tx_hash(self, tx_hash: str) -> int:
        try:
            return parse_felt(tx_hash)
        except ValueError as e:
            raise InvalidHashError(tx_hash, CHAIN_NAME) from e


def _status_label(status: object) -> str | None:
    if status is None:
        return None
    return getattr(status, "value", str(status))
