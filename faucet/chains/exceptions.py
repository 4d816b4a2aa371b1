"""
Chain Exceptions - Error taxonomy shared by every chain backend.

Categories by handling strategy:
- ConfigurationError: fatal at startup, no partial client
- ValidationError: raised before any network access
- QueryError / SubmissionError: node-level failures, never retried internally
- ConfirmationCancelledError: confirmation wait interrupted by the caller
"""

from datetime import datetime, timezone
from typing import Any


class ChainError(Exception):
    """Base exception for all chain client errors."""

    def __init__(
        self,
        message: str,
        chain: str | None = None,
        operation: str | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.chain = chain
        self.operation = operation
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "chain": self.chain,
            "operation": self.operation,
            "original_error": str(self.original_error) if self.original_error else None,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        parts = [self.message]
        if self.chain:
            parts.append(f"[chain={self.chain}]")
        if self.operation:
            parts.append(f"[operation={self.operation}]")
        if self.original_error:
            parts.append(f"(caused by: {self.original_error})")
        return " ".join(parts)


class ConfigurationError(ChainError):
    """Missing or malformed secret, policy data or credential."""

    def __init__(
        self,
        message: str,
        chain: str | None = None,
        config_key: str | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message, chain, "configure", original_error)
        self.config_key = config_key

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["config_key"] = self.config_key
        return data


# ============================================================
# VALIDATION (raised before any network call)
# ============================================================

class ValidationError(ChainError):
    """Input rejected before touching the network."""


class InvalidAddressError(ValidationError):
    """Address failed format validation."""

    def __init__(self, message: str, address: str | None = None, chain: str | None = None) -> None:
        super().__init__(message, chain, "validate_address")
        self.address = address


class EmptyAddressError(InvalidAddressError):
    """Address is empty."""


class MissingPrefixError(InvalidAddressError):
    """Address does not start with 0x."""


class MalformedAddressError(InvalidAddressError):
    """Address body is not a valid hex string of the allowed length."""


class UnsupportedTokenError(ValidationError):
    """Token is not supported (or not resolved) on this network."""

    def __init__(
        self,
        token: str,
        chain: str | None = None,
        supported_tokens: list[str] | None = None,
    ) -> None:
        supported = ", ".join(supported_tokens or [])
        message = f"Unsupported token: {token}"
        if supported:
            message += f" (supported: {supported})"
        super().__init__(message, chain, "validate_token")
        self.token = token
        self.supported_tokens = supported_tokens or []


class InvalidAmountError(ValidationError):
    """Amount is negative or does not fit in 256 bits."""

    def __init__(self, message: str, amount: Any = None) -> None:
        super().__init__(message, operation="validate_amount")
        self.amount = amount


class InvalidHashError(ValidationError):
    """Transaction hash is malformed."""

    def __init__(self, tx_hash: str, chain: str | None = None) -> None:
        super().__init__(f"Invalid transaction hash: {tx_hash!r}", chain, "parse_tx_hash")
        self.tx_hash = tx_hash


# ============================================================
# NETWORK
# ============================================================

class QueryError(ChainError):
    """Read-only RPC call failed."""


class UnexpectedResponseError(QueryError):
    """Decoded result does not match the expected wire layout."""

    def __init__(
        self,
        message: str,
        chain: str | None = None,
        operation: str | None = None,
        raw_result: Any = None,
    ) -> None:
        super().__init__(message, chain, operation)
        self.raw_result = raw_result

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["raw_result"] = str(self.raw_result)[:500] if self.raw_result is not None else None
        return data


class SubmissionError(ChainError):
    """Signed transaction was rejected or could not be submitted."""


class SubmissionTimeoutError(SubmissionError):
    """
    Submission did not finish within its timeout.

    The outcome is unknown: the node may already have accepted the
    transaction, so check the signer's history before resubmitting.
    """

    def __init__(
        self,
        timeout: float | None,
        chain: str | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            f"Submission timed out after {timeout}s; transaction may still be broadcast",
            chain,
            "transfer",
            original_error,
        )
        self.timeout = timeout


# ============================================================
# CONFIRMATION
# ============================================================

class ConfirmationCancelledError(ChainError):
    """Confirmation wait was interrupted before a receipt was observed."""

    def __init__(self, tx_hash: str, chain: str | None = None, message: str | None = None) -> None:
        super().__init__(
            message or f"Confirmation wait cancelled for {tx_hash}",
            chain,
            "wait_for_confirmation",
        )
        self.tx_hash = tx_hash


class ConfirmationTimeoutError(ConfirmationCancelledError):
    """Confirmation wait exceeded its deadline."""

    def __init__(self, tx_hash: str, timeout: float, chain: str | None = None) -> None:
        super().__init__(
            tx_hash,
            chain,
            f"No receipt for {tx_hash} after {timeout}s",
        )
        self.timeout = timeout


class TransactionRevertedError(ChainError):
    """Receipt was observed but the transaction reverted on-chain."""

    def __init__(
        self,
        tx_hash: str,
        chain: str | None = None,
        revert_reason: str | None = None,
    ) -> None:
        message = f"Transaction {tx_hash} reverted"
        if revert_reason:
            message += f": {revert_reason}"
        super().__init__(message, chain, "wait_for_confirmation")
        self.tx_hash = tx_hash
        self.revert_reason = revert_reason
