from __future__ import annotations

from collections.abc import Callable

import pytest

from src.gelato_demo.domain.exceptions import TransactionTimeoutError
from src.gelato_demo.domain.models import (
    TASK_SPEC_NOT_PROVIDED,
    TASK_SPEC_OK,
    TaskCycle,
    TaskSpec,
    TxOptions,
    TxReceipt,
)
from src.gelato_demo.domain.repositories import (
    Erc20Repository,
    GasPriceOracleRepository,
    GelatoCoreRepository,
    SignerRepository,
    TaskDataRepository,
    UserProxyFactoryRepository,
    UserProxyRepository,
)
from src.setup.demo_config import DemoSettings
from src.setup.network_config import NetworkSettings

GELATO_CORE = "0x" + "1" * 40
USER_PROXY_FACTORY = "0x" + "2" * 40
CONDITION_TIME_STATEFUL = "0x" + "3" * 40
ACTION_FEE_HANDLER = "0x" + "4" * 40
ACTION_KYBER_TRADE = "0x" + "5" * 40
PROVIDER_MODULE = "0x" + "6" * 40
DAI = "0x" + "7" * 40
KNC = "0x" + "8" * 40
DEFAULT_EXECUTOR = "0x" + "9" * 40
USER = "0x" + "12" * 20
PROXY = "0x" + "34" * 20

TOKEN = 10**18
CONDITION_DATA = b"\x01" * 32
KYBER_TRADE_DATA = b"\x02" * 64
SET_REF_TIME_DATA = b"\x03" * 68


class FakeTransaction:
    def __init__(
        self,
        tx_hash: str,
        label: str,
        calls: list[str],
        on_mined: Callable[[], None] | None = None,
        errors: list[Exception] | None = None,
        mined_despite_error: bool = False,
    ) -> None:
        self.tx_hash = tx_hash
        self._label = label
        self._calls = calls
        self._on_mined = on_mined
        self._errors = list(errors or [])
        self._mined_despite_error = mined_despite_error

    async def wait(self) -> TxReceipt:
        self._calls.append(f"{self._label}.wait")
        if self._errors:
            error = self._errors.pop(0)
            if self._mined_despite_error:
                self._mined()
            raise error
        self._mined()
        return TxReceipt(tx_hash=self.tx_hash, block_number=1, status=1, gas_used=21_000)

    def _mined(self) -> None:
        if self._on_mined is not None:
            self._on_mined()


class FakeChain(
    SignerRepository,
    GelatoCoreRepository,
    GasPriceOracleRepository,
    UserProxyFactoryRepository,
    UserProxyRepository,
    Erc20Repository,
    TaskDataRepository,
):
    """In-memory stand-in for every contract the workflows talk to."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.signer = USER
        self.task_spec_provided = False
        self.whitelisting_takes_effect = True
        self.task_spec_status: str | None = None
        self.proxy_deployed = True
        self.liquid = True
        self.executor = DEFAULT_EXECUTOR
        self.module_provided = True
        self.balance = 5 * TOKEN
        self.allowance_value = 0
        self.gas_price = 20 * 10**9
        self.broadcast_errors: dict[str, list[Exception]] = {}
        self.confirmation_errors: dict[str, list[Exception]] = {}
        self.mined_despite_errors = False
        self.stuck_waits: dict[str, int] = {}
        self.read_errors: dict[str, Exception] = {}
        self.liquidity_queries: list[tuple[str, int, int]] = []
        self.provided_specs: list[list[TaskSpec]] = []
        self.approvals: list[tuple[str, str, int]] = []
        self.submitted_cycles: list[tuple[str, TaskCycle]] = []
        self.tx_options: dict[str, TxOptions] = {}
        self.kyber_trade_args: dict | None = None
        self._tx_counter = 0

    def _transaction(
        self, label: str, tx_options: TxOptions, on_mined: Callable[[], None] | None = None
    ) -> FakeTransaction:
        self.calls.append(label)
        pending = self.broadcast_errors.get(label)
        if pending:
            raise pending.pop(0)
        self._tx_counter += 1
        self.tx_options[label] = tx_options
        tx_hash = f"0x{self._tx_counter:064x}"
        errors: list[Exception] = [
            TransactionTimeoutError(label, "not mined within 600s", tx_hash)
            for _ in range(self.stuck_waits.pop(label, 0))
        ]
        confirmation = self.confirmation_errors.get(label)
        if confirmation:
            errors.append(confirmation.pop(0))
        return FakeTransaction(
            tx_hash=tx_hash,
            label=label,
            calls=self.calls,
            on_mined=on_mined,
            errors=errors,
            mined_despite_error=self.mined_despite_errors,
        )

    def _read(self, name: str) -> None:
        self.calls.append(name)
        if name in self.read_errors:
            raise self.read_errors[name]

    async def get_address(self) -> str:
        return self.signer

    async def is_task_spec_provided(self, provider: str, task_spec: TaskSpec) -> str:
        self._read("is_task_spec_provided")
        if self.task_spec_status is not None:
            return self.task_spec_status
        return TASK_SPEC_OK if self.task_spec_provided else TASK_SPEC_NOT_PROVIDED

    async def provide_task_specs(
        self, task_specs: list[TaskSpec], tx_options: TxOptions
    ) -> FakeTransaction:
        def _mined() -> None:
            if self.whitelisting_takes_effect:
                self.task_spec_provided = True

        tx = self._transaction("provide_task_specs", tx_options, on_mined=_mined)
        self.provided_specs.append(task_specs)
        return tx

    async def is_provider_liquid(self, provider: str, gas_limit: int, gas_price: int) -> bool:
        self._read("is_provider_liquid")
        self.liquidity_queries.append((provider, gas_limit, gas_price))
        return self.liquid

    async def executor_by_provider(self, provider: str) -> str:
        self._read("executor_by_provider")
        return self.executor

    async def is_module_provided(self, provider: str, module: str) -> bool:
        self._read("is_module_provided")
        return self.module_provided

    async def gelato_gas_price_oracle(self) -> str:
        return "0x" + "0" * 39 + "1"

    async def current_gas_price(self) -> int:
        self._read("current_gas_price")
        return self.gas_price

    async def predict_proxy_address(self, user: str, salt: int) -> str:
        self._read("predict_proxy_address")
        return PROXY

    async def is_gelato_user_proxy(self, proxy: str) -> bool:
        self._read("is_gelato_user_proxy")
        return self.proxy_deployed

    async def submit_task_cycle(
        self, proxy: str, task_cycle: TaskCycle, tx_options: TxOptions
    ) -> FakeTransaction:
        tx = self._transaction("submit_task_cycle", tx_options)
        self.submitted_cycles.append((proxy, task_cycle))
        return tx

    async def balance_of(self, token: str, owner: str) -> int:
        self._read("balance_of")
        return self.balance

    async def allowance(self, token: str, owner: str, spender: str) -> int:
        self._read("allowance")
        return self.allowance_value

    async def approve(
        self, token: str, spender: str, amount: int, tx_options: TxOptions
    ) -> FakeTransaction:
        def _mined() -> None:
            self.allowance_value = amount

        tx = self._transaction("approve", tx_options, on_mined=_mined)
        self.approvals.append((token, spender, amount))
        return tx

    async def get_condition_data(self, condition: str, user_proxy: str) -> bytes:
        self._read("get_condition_data")
        return CONDITION_DATA

    def encode_set_ref_time(self, condition: str, time_delta: int, ref_time: int) -> bytes:
        return SET_REF_TIME_DATA

    async def get_kyber_trade_data(
        self,
        action: str,
        origin: str,
        send_token: str,
        send_amount: int,
        receive_token: str,
        receiver: str,
    ) -> bytes:
        self._read("get_kyber_trade_data")
        self.kyber_trade_args = {
            "origin": origin,
            "send_token": send_token,
            "send_amount": send_amount,
            "receive_token": receive_token,
            "receiver": receiver,
        }
        return KYBER_TRADE_DATA


@pytest.fixture
def env_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Provide required environment variables for NetworkSettings."""
    monkeypatch.setenv("RPC_URL", "http://localhost:8545")
    monkeypatch.setenv("USER_PRIVATE_KEY", "0x" + "11" * 32)
    monkeypatch.setenv("PROVIDER_PRIVATE_KEY", "0x" + "22" * 32)
    monkeypatch.setenv("GELATO_CORE", GELATO_CORE)
    monkeypatch.setenv("GELATO_USER_PROXY_FACTORY", USER_PROXY_FACTORY)
    monkeypatch.setenv("CONDITION_TIME_STATEFUL", CONDITION_TIME_STATEFUL)
    monkeypatch.setenv("ACTION_FEE_HANDLER", ACTION_FEE_HANDLER)
    monkeypatch.setenv("ACTION_KYBER_TRADE", ACTION_KYBER_TRADE)
    monkeypatch.setenv("PROVIDER_MODULE_GELATO_USER_PROXY", PROVIDER_MODULE)
    monkeypatch.setenv("DAI", DAI)
    monkeypatch.setenv("KNC", KNC)
    monkeypatch.setenv("GELATO_DEFAULT_EXECUTOR", DEFAULT_EXECUTOR)
    monkeypatch.setenv("TX_RETRY_BACKOFF_SEC", "0")


@pytest.fixture
def network_settings(env_settings: None) -> NetworkSettings:
    return NetworkSettings()  # type: ignore[call-arg]


@pytest.fixture
def demo_settings() -> DemoSettings:
    return DemoSettings()


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()
