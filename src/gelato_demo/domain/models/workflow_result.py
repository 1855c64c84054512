from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class WorkflowOutcome(str, Enum):
    SUCCEEDED = "SUCCEEDED"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    TRANSACTION_FAILED = "TRANSACTION_FAILED"
    POSTCONDITION_FAILED = "POSTCONDITION_FAILED"
    READ_FAILED = "READ_FAILED"


class PreconditionKind(str, Enum):
    PROXY_NOT_DEPLOYED = "PROXY_NOT_DEPLOYED"
    PROVIDER_ILLIQUID = "PROVIDER_ILLIQUID"
    EXECUTOR_NOT_ASSIGNED = "EXECUTOR_NOT_ASSIGNED"
    MODULE_NOT_PROVIDED = "MODULE_NOT_PROVIDED"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    TASK_SPEC_REJECTED = "TASK_SPEC_REJECTED"


class TransactionFailureKind(str, Enum):
    BROADCAST = "BROADCAST"
    CONFIRMATION = "CONFIRMATION"


class WorkflowResult(BaseModel):
    outcome: WorkflowOutcome
    message: str = Field(default="", description="Human-readable summary or guidance.")
    precondition: PreconditionKind | None = None
    failure: TransactionFailureKind | None = None
    tx_hashes: list[str] = Field(
        default_factory=list, description="Hashes of transactions sent during the run."
    )

    @property
    def ok(self) -> bool:
        return self.outcome is WorkflowOutcome.SUCCEEDED
