from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.gelato_demo.domain.exceptions import (
    TransactionFailedError,
    TransactionTimeoutError,
)
from src.gelato_demo.domain.models import TxReceipt
from src.gelato_demo.domain.repositories import TransactionHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _before_retry_sleep(label: str) -> Callable[[RetryCallState], None]:
    def log(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Transaction step failed, retrying",
            extra={
                "label": label,
                "attempt": retry_state.attempt_number,
                "delay_sec": retry_state.next_action.sleep if retry_state.next_action else 0,
                "failure": exc.kind.value if isinstance(exc, TransactionFailedError) else None,
                "details": str(exc),
            },
        )

    return log


async def retry_transaction(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    backoff_sec: float,
    label: str,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Re-run an idempotent transaction step with exponential backoff.

    Only broadcast and confirmation failures are retried; anything else,
    precondition failures included, propagates on the first occurrence.
    """
    retrying = AsyncRetrying(
        retry=retry_if_exception_type(TransactionFailedError),
        stop=stop_after_attempt(max(attempts, 1)),
        wait=wait_exponential(multiplier=backoff_sec, min=0),
        before_sleep=_before_retry_sleep(label),
        sleep=sleep,
        reraise=True,
    )
    return await retrying(operation)


class PendingTransaction:
    """
    Tracks the transaction a retried step is waiting on.

    A wait that times out leaves the transaction tracked, so the next attempt
    keeps waiting on the same hash instead of queueing a new transaction
    behind it. Reverts and other confirmation failures clear it.
    """

    def __init__(self) -> None:
        self.handle: TransactionHandle | None = None

    @property
    def pending(self) -> bool:
        return self.handle is not None

    def track(self, handle: TransactionHandle) -> None:
        self.handle = handle

    async def wait(self) -> TxReceipt:
        if self.handle is None:
            raise RuntimeError("No transaction is being tracked")
        try:
            receipt = await self.handle.wait()
        except TransactionTimeoutError:
            logger.warning(
                "Transaction still pending", extra={"tx_hash": self.handle.tx_hash}
            )
            raise
        except TransactionFailedError:
            self.handle = None
            raise
        self.handle = None
        return receipt
