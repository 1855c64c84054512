from src.gelato_demo.domain.models.action import Action, validate_action_chain
from src.gelato_demo.domain.models.condition import Condition
from src.gelato_demo.domain.models.operation import DataFlow, Operation
from src.gelato_demo.domain.models.provider import GelatoProvider
from src.gelato_demo.domain.models.task import Task
from src.gelato_demo.domain.models.task_cycle import TaskCycle
from src.gelato_demo.domain.models.task_spec import (
    TASK_SPEC_NOT_PROVIDED,
    TASK_SPEC_OK,
    TaskSpec,
)
from src.gelato_demo.domain.models.transaction import TxOptions, TxReceipt
from src.gelato_demo.domain.models.types import HASH_ZERO, Address, HexData
from src.gelato_demo.domain.models.workflow_result import (
    PreconditionKind,
    TransactionFailureKind,
    WorkflowOutcome,
    WorkflowResult,
)

__all__ = [
    "Action",
    "Address",
    "Condition",
    "DataFlow",
    "GelatoProvider",
    "HASH_ZERO",
    "HexData",
    "Operation",
    "PreconditionKind",
    "Task",
    "TaskCycle",
    "TaskSpec",
    "TASK_SPEC_NOT_PROVIDED",
    "TASK_SPEC_OK",
    "TransactionFailureKind",
    "TxOptions",
    "TxReceipt",
    "WorkflowOutcome",
    "WorkflowResult",
    "validate_action_chain",
]
