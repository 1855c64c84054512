from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from web3 import Web3

from src.gelato_demo.domain.models import (
    Action,
    Condition,
    GelatoProvider,
    Task,
    TaskSpec,
    TxReceipt,
)


class AbiMapper:
    """Translate domain models to the tuple shapes the Gelato ABI expects."""

    @staticmethod
    def condition(condition: Condition) -> tuple:
        return (condition.inst, condition.data)

    @staticmethod
    def action(action: Action) -> tuple:
        return (
            action.addr,
            action.data,
            int(action.operation),
            int(action.data_flow),
            action.value,
            action.terms_ok_check,
        )

    @classmethod
    def task(cls, task: Task) -> tuple:
        return (
            [cls.condition(condition) for condition in task.conditions],
            [cls.action(action) for action in task.actions],
            task.self_provider_gas_limit,
            task.self_provider_gas_price_ceil,
        )

    @classmethod
    def task_spec(cls, task_spec: TaskSpec) -> tuple:
        return (
            list(task_spec.conditions),
            [cls.action(action) for action in task_spec.actions],
            task_spec.gas_price_ceil,
        )

    @staticmethod
    def provider(provider: GelatoProvider) -> tuple:
        return (provider.addr, provider.module)

    @staticmethod
    def to_receipt(receipt: Mapping[str, Any]) -> TxReceipt:
        return TxReceipt(
            tx_hash=Web3.to_hex(receipt["transactionHash"]),
            block_number=receipt["blockNumber"],
            status=receipt["status"],
            gas_used=receipt.get("gasUsed", 0),
        )
