from __future__ import annotations

from src.gelato_demo.domain.models.workflow_result import (
    PreconditionKind,
    TransactionFailureKind,
)


class WorkflowError(Exception):
    """Base class for failures that end a workflow run."""


class PreconditionFailedError(WorkflowError):
    """Raised when on-chain state does not allow the workflow to proceed."""

    def __init__(self, kind: PreconditionKind, guidance: str) -> None:
        super().__init__(guidance)
        self.kind = kind
        self.guidance = guidance


class TransactionFailedError(WorkflowError):
    kind: TransactionFailureKind

    def __init__(self, label: str, details: str, tx_hash: str | None = None) -> None:
        super().__init__(f"{label} transaction failed ({self.kind.value.lower()}): {details}")
        self.label = label
        self.details = details
        self.tx_hash = tx_hash


class TransactionBroadcastError(TransactionFailedError):
    """Raised when a transaction is rejected before inclusion."""

    kind = TransactionFailureKind.BROADCAST


class TransactionConfirmationError(TransactionFailedError):
    """Raised when a broadcast transaction reverts or its receipt cannot be read."""

    kind = TransactionFailureKind.CONFIRMATION


class TransactionTimeoutError(TransactionConfirmationError):
    """Raised when a broadcast transaction is still pending after the wait timeout."""


class PostconditionFailedError(WorkflowError):
    """Raised when state did not reach the expected value after a transaction."""


class ChainReadError(WorkflowError):
    """Raised when a contract view call or RPC lookup fails."""

    def __init__(self, label: str, details: str) -> None:
        super().__init__(f"{label} call failed: {details}")
        self.label = label
        self.details = details


class ConfigurationError(Exception):
    """Raised when required settings such as a wallet key are missing."""
