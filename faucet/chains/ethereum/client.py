"""
Ethereum chain client.

This module handles:
- Native ETH and ERC-20 transfers signed with the faucet key
- Balance checks (eth_getBalance / balanceOf)
- Receipt polling with revert detection

Web3 is synchronous; every RPC call runs in a thread pool so the
client keeps the same async contract as the other backends.
"""

import asyncio
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
from typing import Any, TypeVar

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address
from loguru import logger
from web3 import Web3

from faucet.config.constants import (
    BLOCKCHAIN_CONNECT_TIMEOUT,
    BLOCKCHAIN_EXECUTOR_WORKERS,
    BLOCKCHAIN_RPC_TIMEOUT,
    BLOCKCHAIN_TIMEOUT,
    CONFIRMATION_POLL_INTERVAL,
    DEFAULT_NATIVE_GAS_LIMIT,
    GAS_LIMIT_MULTIPLIER,
)
from faucet.utils.security import mask_address, mask_tx_hash

from ..base import Chain
from ..config import ChainConfig
from ..exceptions import (
    ConfigurationError,
    InvalidAddressError,
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
from ..units import ensure_uint256
from . import validator
from .config import DEFAULT_EXPLORER_URLS
from .validator import CHAIN_NAME, TX_HASH_PATTERN

T = TypeVar("T")

# ERC-20 standard functions
ERC20_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [
            {"name": "_to", "type": "address"},
            {"name": "_value", "type": "uint256"},
        ],
        "name": "transfer",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function",
    },
]


class EthereumClient(Chain):
    """
    Chain implementation for Ethereum.

    A token with an empty contract address is the native coin; any other
    configured token is treated as ERC-20.
    """

    def __init__(
        self,
        config: ChainConfig,
        w3: Web3,
        account: LocalAccount,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        """
        Initialize client from a connected Web3 instance and signer.

        Raises:
            ConfigurationError: If a configured token address is malformed
        """
        self._config = config
        self._w3 = w3
        self._account = account
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=BLOCKCHAIN_EXECUTOR_WORKERS,
            thread_name_prefix="web3",
        )
        # Nonce lock for preventing races between parallel transfers
        self._nonce_lock = asyncio.Lock()
        self._token_contracts = MappingProxyType(self._resolve_token_contracts(config))

    @staticmethod
    def _resolve_token_contracts(config: ChainConfig) -> dict[str, str | None]:
        contracts: dict[str, str | None] = {}
        for symbol in sorted(validator.SUPPORTED_TOKENS):
            if symbol not in config.tokens:
                continue
            address = config.get_token_address(symbol)
            if not address:
                contracts[symbol] = None
                continue
            try:
                validator.validate_address(address)
            except InvalidAddressError as e:
                raise ConfigurationError(
                    f"Invalid {symbol} token address", CHAIN_NAME, f"tokens.{symbol}", e
                ) from e
            contracts[symbol] = to_checksum_address(address)
        return contracts

    @classmethod
    async def connect(
        cls,
        config: ChainConfig,
        w3: Web3 | None = None,
    ) -> "EthereumClient":
        """
        Create a client: connect the HTTP provider and load the faucet key.

        Raises:
            ConfigurationError: Unreachable endpoint, malformed key, or a key
                that does not match the configured faucet address
        """
        try:
            account = Account.from_key(config.private_key.get_secret_value())
        except Exception:
            # The original error may echo the key
            raise ConfigurationError(
                "Invalid private key format", CHAIN_NAME, "ETHEREUM_PRIVATE_KEY"
            ) from None

        try:
            validator.validate_address(config.signer_address)
        except InvalidAddressError as e:
            raise ConfigurationError(
                "Invalid account address", CHAIN_NAME, "ETHEREUM_ADDRESS", e
            ) from e

        if account.address.lower() != config.signer_address.lower():
            raise ConfigurationError(
                f"Private key does not match faucet address {mask_address(config.signer_address)}",
                CHAIN_NAME,
                "ETHEREUM_ADDRESS",
            )

        if w3 is None:
            w3 = Web3(Web3.HTTPProvider(
                config.rpc_url,
                request_kwargs={"timeout": BLOCKCHAIN_RPC_TIMEOUT},
            ))

        client = cls(config, w3, account)
        try:
            connected = await client._run(
                lambda w3: w3.is_connected(), BLOCKCHAIN_CONNECT_TIMEOUT, "Ethereum connect"
            )
        except Exception as e:
            await client.close()
            raise ConfigurationError(
                "Failed to connect to Ethereum RPC endpoint", CHAIN_NAME, "ETHEREUM_RPC_URL", e
            ) from e

        if not connected:
            await client.close()
            logger.error("Ethereum RPC endpoint unreachable")
            raise ConfigurationError(
                "Failed to connect to Ethereum RPC endpoint", CHAIN_NAME, "ETHEREUM_RPC_URL"
            )

        logger.info(
            f"Ethereum client ready: network={config.network}, "
            f"signer={mask_address(account.address)}, tokens={sorted(client._token_contracts)}"
        )
        return client

    async def _run(
        self,
        sync_func: Callable[[Web3], T],
        timeout: float | None,
        operation_name: str,
    ) -> T:
        """Run a synchronous Web3 function in the thread pool."""
        loop = asyncio.get_running_loop()
        return await with_timeout(
            loop.run_in_executor(self._executor, lambda: sync_func(self._w3)),
            timeout,
            operation_name,
        )

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
        Transfer native ETH or an ERC-20 token.

        Uses the pending nonce and the node's current gas price.

        Nonce allocation and broadcast run under one lock that is held until
        the worker thread finishes, even if the caller already timed out.
        A timeout raises SubmissionTimeoutError: the transaction may still
        have been broadcast.
        """
        self.validate_address(recipient)
        contract_address = self._resolve_token(token)
        ensure_uint256(amount)
        to_address = to_checksum_address(recipient)
        sender = self._account.address

        def _send_tx(w3: Web3) -> str:
            nonce = w3.eth.get_transaction_count(sender, "pending")
            gas_price = w3.eth.gas_price
            chain_id = w3.eth.chain_id

            if contract_address is None:
                txn: dict[str, Any] = {
                    "to": to_address,
                    "value": amount,
                    "gas": DEFAULT_NATIVE_GAS_LIMIT,
                    "gasPrice": gas_price,
                    "nonce": nonce,
                    "chainId": chain_id,
                }
            else:
                contract = w3.eth.contract(address=contract_address, abi=ERC20_ABI)
                func = contract.functions.transfer(to_address, amount)
                gas_est = func.estimate_gas({"from": sender})
                txn = func.build_transaction({
                    "from": sender,
                    "gas": int(gas_est * GAS_LIMIT_MULTIPLIER),
                    "gasPrice": gas_price,
                    "nonce": nonce,
                    "chainId": chain_id,
                })

            logger.debug(
                f"Sending {token.upper()} tx: to={mask_address(to_address)}, amount={amount}, "
                f"nonce={nonce}, gas_price={gas_price} wei"
            )
            signed = self._account.sign_transaction(txn)
            return Web3.to_hex(w3.eth.send_raw_transaction(signed.raw_transaction))

        # Released by the worker's done-callback: a timed-out send owns its nonce until it ends
        loop = asyncio.get_running_loop()
        await self._nonce_lock.acquire()
        try:
            future = loop.run_in_executor(self._executor, lambda: _send_tx(self._w3))
        except BaseException:
            self._nonce_lock.release()
            raise
        timed_out = False

        def _on_send_done(fut: asyncio.Future) -> None:
            self._nonce_lock.release()
            if fut.cancelled():
                return
            error = fut.exception()
            if timed_out and error is None:
                logger.warning(
                    f"Ethereum transfer finished after timeout, hash: {mask_tx_hash(fut.result())}"
                )

        future.add_done_callback(_on_send_done)

        try:
            tx_hash = await with_timeout(asyncio.shield(future), timeout, "Ethereum transfer")
        except TimeoutError as e:
            timed_out = True
            logger.error(
                f"Ethereum transfer of {amount} {token.upper()} to "
                f"{mask_address(recipient)} timed out, outcome unknown"
            )
            raise SubmissionTimeoutError(timeout, CHAIN_NAME, e) from e
        except Exception as e:
            logger.error(
                f"Ethereum transfer of {amount} {token.upper()} to "
                f"{mask_address(recipient)} failed: {e}"
            )
            raise SubmissionError(
                f"Transaction failed: {e}", CHAIN_NAME, "transfer", e
            ) from e

        logger.info(
            f"Ethereum transfer sent: {amount} {token.upper()} to {mask_address(recipient)}, "
            f"hash: {mask_tx_hash(tx_hash)}"
        )
        return tx_hash

    async def get_balance(
        self,
        address: str,
        token: str,
        timeout: float | None = BLOCKCHAIN_TIMEOUT,
    ) -> int:
        """Get native or ERC-20 balance at the latest block."""
        self.validate_address(address)
        contract_address = self._resolve_token(token)
        owner = to_checksum_address(address)

        def _balance(w3: Web3) -> Any:
            if contract_address is None:
                return w3.eth.get_balance(owner, "latest")
            contract = w3.eth.contract(address=contract_address, abi=ERC20_ABI)
            return contract.functions.balanceOf(owner).call(block_identifier="latest")

        try:
            result = await self._run(_balance, timeout, "Ethereum balance")
        except Exception as e:
            logger.error(f"Get {token.upper()} balance failed for {mask_address(address)}: {e}")
            raise QueryError(
                f"Failed to get balance: {e}", CHAIN_NAME, "get_balance", e
            ) from e

        if isinstance(result, bool) or not isinstance(result, int):
            raise UnexpectedResponseError(
                f"Unexpected balance result type: {type(result).__name__}",
                CHAIN_NAME,
                "get_balance",
                result,
            )
        return result

    async def wait_for_confirmation(
        self,
        tx_hash: str,
        cancel_event: asyncio.Event | None = None,
        *,
        poll_interval: float | None = None,
        timeout: float | None = None,
    ) -> TransactionConfirmation:
        """
        Poll eth_getTransactionReceipt until the transaction is mined.

        TransactionNotFound (still pending) and RPC errors are retried on
        the next tick.
        """
        if not tx_hash or not TX_HASH_PATTERN.match(tx_hash):
            raise InvalidHashError(tx_hash, CHAIN_NAME)

        receipt = await wait_for_receipt(
            lambda: self._run(
                lambda w3: w3.eth.get_transaction_receipt(tx_hash),
                BLOCKCHAIN_TIMEOUT,
                "Ethereum receipt",
            ),
            tx_hash,
            chain=CHAIN_NAME,
            interval=poll_interval or CONFIRMATION_POLL_INTERVAL,
            cancel_event=cancel_event,
            timeout=timeout,
        )

        # Pre-Byzantium receipts carry a state root instead of a status
        status = receipt.get("status")
        if status == 0:
            logger.warning(f"Ethereum transaction {mask_tx_hash(tx_hash)} reverted")
            raise TransactionRevertedError(tx_hash, CHAIN_NAME)

        logger.info(f"Ethereum transaction confirmed: {mask_tx_hash(tx_hash)}")
        return TransactionConfirmation(
            tx_hash=tx_hash,
            block_number=receipt.get("blockNumber"),
            finality_status="confirmed",
            execution_status="SUCCEEDED" if status == 1 else None,
        )

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

    def _resolve_token(self, token: str) -> str | None:
        """Validate the symbol and return its contract (None for native)."""
        self.validate_token(token)
        symbol = token.upper()
        if symbol not in self._token_contracts:
            raise UnsupportedTokenError(token, CHAIN_NAME, sorted(self._token_contracts))
        return self._token_contracts[symbol]

    async def close(self) -> None:
        """Shut down the thread pool."""
        if self._owns_executor:
            self._executor.shutdown(wait=False)
