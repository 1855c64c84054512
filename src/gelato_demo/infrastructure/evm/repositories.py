from __future__ import annotations

from typing import Any

from web3 import Web3

from src.gelato_demo.domain.models import TaskCycle, TaskSpec, TxOptions
from src.gelato_demo.domain.repositories import (
    Erc20Repository,
    GasPriceOracleRepository,
    GelatoCoreRepository,
    TaskDataRepository,
    TransactionHandle,
    UserProxyFactoryRepository,
    UserProxyRepository,
)
from src.gelato_demo.infrastructure.evm.abis import (
    ACTION_KYBER_TRADE_ABI,
    CONDITION_TIME_STATEFUL_ABI,
    ERC20_ABI,
    GAS_PRICE_ORACLE_ABI,
    GELATO_CORE_ABI,
    GELATO_USER_PROXY_ABI,
    GELATO_USER_PROXY_FACTORY_ABI,
)
from src.gelato_demo.infrastructure.evm.client import Web3Client
from src.gelato_demo.infrastructure.evm.mappers import AbiMapper


class Web3GelatoCoreRepository(GelatoCoreRepository):
    def __init__(self, client: Web3Client, address: str) -> None:
        self._client = client
        self._core = client.contract(address, GELATO_CORE_ABI)

    async def is_task_spec_provided(self, provider: str, task_spec: TaskSpec) -> str:
        function = self._core.functions.isTaskSpecProvided(
            provider, AbiMapper.task_spec(task_spec)
        )
        return await self._client.call("isTaskSpecProvided", function)

    async def provide_task_specs(
        self, task_specs: list[TaskSpec], tx_options: TxOptions
    ) -> TransactionHandle:
        function = self._core.functions.provideTaskSpecs(
            [AbiMapper.task_spec(spec) for spec in task_specs]
        )
        return await self._client.send("provideTaskSpecs", function, tx_options)

    async def is_provider_liquid(self, provider: str, gas_limit: int, gas_price: int) -> bool:
        function = self._core.functions.isProviderLiquid(provider, gas_limit, gas_price)
        return await self._client.call("isProviderLiquid", function)

    async def executor_by_provider(self, provider: str) -> str:
        return await self._client.call(
            "executorByProvider", self._core.functions.executorByProvider(provider)
        )

    async def is_module_provided(self, provider: str, module: str) -> bool:
        return await self._client.call(
            "isModuleProvided", self._core.functions.isModuleProvided(provider, module)
        )

    async def gelato_gas_price_oracle(self) -> str:
        return await self._client.call(
            "gelatoGasPriceOracle", self._core.functions.gelatoGasPriceOracle()
        )


class Web3GasPriceOracleRepository(GasPriceOracleRepository):
    """Reads the gelato gas price from the oracle GelatoCore points at."""

    def __init__(self, client: Web3Client, core: GelatoCoreRepository) -> None:
        self._client = client
        self._core = core
        self._oracle: Any = None

    async def current_gas_price(self) -> int:
        if self._oracle is None:
            oracle_address = await self._core.gelato_gas_price_oracle()
            self._oracle = self._client.contract(oracle_address, GAS_PRICE_ORACLE_ABI)
        answer = await self._client.call("latestAnswer", self._oracle.functions.latestAnswer())
        return int(answer)


class Web3UserProxyFactoryRepository(UserProxyFactoryRepository):
    def __init__(self, client: Web3Client, address: str) -> None:
        self._client = client
        self._factory = client.contract(address, GELATO_USER_PROXY_FACTORY_ABI)

    async def predict_proxy_address(self, user: str, salt: int) -> str:
        return await self._client.call(
            "predictProxyAddress", self._factory.functions.predictProxyAddress(user, salt)
        )

    async def is_gelato_user_proxy(self, proxy: str) -> bool:
        return await self._client.call(
            "isGelatoUserProxy", self._factory.functions.isGelatoUserProxy(proxy)
        )


class Web3UserProxyRepository(UserProxyRepository):
    def __init__(self, client: Web3Client) -> None:
        self._client = client

    async def submit_task_cycle(
        self, proxy: str, task_cycle: TaskCycle, tx_options: TxOptions
    ) -> TransactionHandle:
        user_proxy = self._client.contract(proxy, GELATO_USER_PROXY_ABI)
        function = user_proxy.functions.submitTaskCycle(
            AbiMapper.provider(task_cycle.provider),
            [AbiMapper.task(task) for task in task_cycle.tasks],
            task_cycle.expiry_date,
            task_cycle.cycles,
        )
        return await self._client.send("submitTaskCycle", function, tx_options)


class Web3Erc20Repository(Erc20Repository):
    def __init__(self, client: Web3Client) -> None:
        self._client = client
        self._tokens: dict[str, Any] = {}

    def _token(self, token: str) -> Any:
        if token not in self._tokens:
            self._tokens[token] = self._client.contract(token, ERC20_ABI)
        return self._tokens[token]

    async def balance_of(self, token: str, owner: str) -> int:
        return await self._client.call(
            "balanceOf", self._token(token).functions.balanceOf(owner)
        )

    async def allowance(self, token: str, owner: str, spender: str) -> int:
        return await self._client.call(
            "allowance", self._token(token).functions.allowance(owner, spender)
        )

    async def approve(
        self, token: str, spender: str, amount: int, tx_options: TxOptions
    ) -> TransactionHandle:
        function = self._token(token).functions.approve(spender, amount)
        return await self._client.send("approve", function, tx_options)


class Web3TaskDataRepository(TaskDataRepository):
    def __init__(self, client: Web3Client) -> None:
        self._client = client

    async def get_condition_data(self, condition: str, user_proxy: str) -> bytes:
        contract = self._client.contract(condition, CONDITION_TIME_STATEFUL_ABI)
        return await self._client.call(
            "getConditionData", contract.functions.getConditionData(user_proxy)
        )

    def encode_set_ref_time(self, condition: str, time_delta: int, ref_time: int) -> bytes:
        contract = self._client.contract(condition, CONDITION_TIME_STATEFUL_ABI)
        encoded = contract.encode_abi("setRefTime", args=[time_delta, ref_time])
        return Web3.to_bytes(hexstr=encoded)

    async def get_kyber_trade_data(
        self,
        action: str,
        origin: str,
        send_token: str,
        send_amount: int,
        receive_token: str,
        receiver: str,
    ) -> bytes:
        contract = self._client.contract(action, ACTION_KYBER_TRADE_ABI)
        function = contract.functions.getActionData(
            origin, send_token, send_amount, receive_token, receiver
        )
        return await self._client.call("getActionData", function)
