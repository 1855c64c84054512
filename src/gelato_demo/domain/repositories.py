from __future__ import annotations

from typing import Protocol

from src.gelato_demo.domain.models import TaskCycle, TaskSpec, TxOptions, TxReceipt


class TransactionHandle(Protocol):
    """A broadcast transaction that can be awaited until it is mined."""

    tx_hash: str

    async def wait(self) -> TxReceipt:
        """Resolve with the receipt; raise on revert, drop or timeout."""


class SignerRepository(Protocol):
    async def get_address(self) -> str:
        """Return the checksum address of the active signer."""


class GelatoCoreRepository(Protocol):
    """Provider-facing views and writes on GelatoCore."""

    async def is_task_spec_provided(self, provider: str, task_spec: TaskSpec) -> str:
        """Return ``"OK"`` when whitelisted, otherwise the reason string."""

    async def provide_task_specs(
        self, task_specs: list[TaskSpec], tx_options: TxOptions
    ) -> TransactionHandle:
        """Whitelist ``task_specs`` for the signer."""

    async def is_provider_liquid(self, provider: str, gas_limit: int, gas_price: int) -> bool:
        """Whether ``provider`` can pay ``gas_limit`` at ``gas_price``."""

    async def executor_by_provider(self, provider: str) -> str:
        """Return the executor assigned to ``provider``."""

    async def is_module_provided(self, provider: str, module: str) -> bool:
        """Whether ``module`` is registered for ``provider``."""

    async def gelato_gas_price_oracle(self) -> str:
        """Return the address of the gas price oracle GelatoCore reads from."""


class GasPriceOracleRepository(Protocol):
    async def current_gas_price(self) -> int:
        """Return the gas price executors are currently paid at, in wei."""


class UserProxyFactoryRepository(Protocol):
    async def predict_proxy_address(self, user: str, salt: int) -> str:
        """Return the CREATE2 address of the proxy for ``user`` and ``salt``."""

    async def is_gelato_user_proxy(self, proxy: str) -> bool:
        """Whether ``proxy`` was deployed by the factory."""


class UserProxyRepository(Protocol):
    async def submit_task_cycle(
        self, proxy: str, task_cycle: TaskCycle, tx_options: TxOptions
    ) -> TransactionHandle:
        """Submit ``task_cycle`` through the user proxy at ``proxy``."""


class Erc20Repository(Protocol):
    async def balance_of(self, token: str, owner: str) -> int:
        """Return the token balance of ``owner`` in base units."""

    async def allowance(self, token: str, owner: str, spender: str) -> int:
        """Return how much ``spender`` may move on behalf of ``owner``."""

    async def approve(
        self, token: str, spender: str, amount: int, tx_options: TxOptions
    ) -> TransactionHandle:
        """Set the signer's allowance for ``spender`` to ``amount``."""


class TaskDataRepository(Protocol):
    """Encodes condition and action payloads using the deployed contracts."""

    async def get_condition_data(self, condition: str, user_proxy: str) -> bytes:
        """Return ConditionTimeStateful data bound to ``user_proxy``."""

    def encode_set_ref_time(self, condition: str, time_delta: int, ref_time: int) -> bytes:
        """Return call data for ConditionTimeStateful.setRefTime."""

    async def get_kyber_trade_data(
        self,
        action: str,
        origin: str,
        send_token: str,
        send_amount: int,
        receive_token: str,
        receiver: str,
    ) -> bytes:
        """Return ActionKyberTrade data for one trade."""
