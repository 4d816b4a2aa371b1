"""Result records returned by chain clients."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TransactionConfirmation:
    """Outcome of a confirmed transaction."""

    tx_hash: str
    """Transaction hash as submitted."""

    block_number: int | None = None
    """Block the transaction was included in, if reported."""

    finality_status: str | None = None
    """Network finality label (e.g. ACCEPTED_ON_L2, confirmed)."""

    execution_status: str | None = None
    """Execution label (e.g. SUCCEEDED)."""

    def to_dict(self) -> dict:
        return {
            "tx_hash": self.tx_hash,
            "block_number": self.block_number,
            "finality_status": self.finality_status,
            "execution_status": self.execution_status,
        }
