from __future__ import annotations

from dataclasses import dataclass, field

from src.gelato_demo.application.retry import PendingTransaction
from src.gelato_demo.domain.models import GelatoProvider, Task


@dataclass
class SubmissionContext:
    """State accumulated by the submission workflow, one step at a time."""

    user: str
    proxy: str | None = None
    task: Task | None = None
    provider: GelatoProvider | None = None
    approval: PendingTransaction = field(default_factory=PendingTransaction)
    tx_hashes: list[str] = field(default_factory=list)

    @property
    def proxy_address(self) -> str:
        if self.proxy is None:
            raise RuntimeError("User proxy has not been resolved yet")
        return self.proxy

    @property
    def bound_task(self) -> Task:
        if self.task is None:
            raise RuntimeError("Task has not been assembled yet")
        return self.task
