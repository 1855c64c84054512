from __future__ import annotations

import logging
import time
from collections.abc import Callable

import inject

from src.gelato_demo.application.context import SubmissionContext
from src.gelato_demo.application.retry import PendingTransaction, retry_transaction
from src.gelato_demo.application.task_builders import build_kyber_task
from src.gelato_demo.domain.exceptions import (
    ChainReadError,
    PostconditionFailedError,
    PreconditionFailedError,
    TransactionFailedError,
    WorkflowError,
)
from src.gelato_demo.domain.models import (
    TASK_SPEC_NOT_PROVIDED,
    TASK_SPEC_OK,
    GelatoProvider,
    PreconditionKind,
    TaskCycle,
    TaskSpec,
    TxOptions,
    WorkflowOutcome,
    WorkflowResult,
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

logger = logging.getLogger(__name__)

_PROVIDE_HINT = "Fund the provider, assign the executor and add the module first."


def _failure_result(exc: WorkflowError, tx_hashes: list[str]) -> WorkflowResult:
    """Map a workflow exception onto the result returned to the caller."""
    if isinstance(exc, PreconditionFailedError):
        logger.error("Precondition not met", extra={"kind": exc.kind.value})
        return WorkflowResult(
            outcome=WorkflowOutcome.PRECONDITION_FAILED,
            precondition=exc.kind,
            message=exc.guidance,
            tx_hashes=tx_hashes,
        )
    if isinstance(exc, TransactionFailedError):
        logger.error(
            "Transaction failed",
            extra={"label": exc.label, "failure": exc.kind.value, "tx_hash": exc.tx_hash},
        )
        return WorkflowResult(
            outcome=WorkflowOutcome.TRANSACTION_FAILED,
            failure=exc.kind,
            message=str(exc),
            tx_hashes=tx_hashes,
        )
    if isinstance(exc, ChainReadError):
        logger.error("Chain read failed", extra={"label": exc.label})
        return WorkflowResult(
            outcome=WorkflowOutcome.READ_FAILED,
            message=str(exc),
            tx_hashes=tx_hashes,
        )
    logger.error("Postcondition failed", extra={"details": str(exc)})
    return WorkflowResult(
        outcome=WorkflowOutcome.POSTCONDITION_FAILED,
        message=str(exc),
        tx_hashes=tx_hashes,
    )


class WhitelistService:
    """Makes sure a TaskSpec is whitelisted for the signing provider."""

    def __init__(
        self,
        core: GelatoCoreRepository | None = None,
        signer: SignerRepository | None = None,
        network: NetworkSettings | None = None,
        demo: DemoSettings | None = None,
    ) -> None:
        self._core = core or inject.instance(GelatoCoreRepository)
        self._signer = signer or inject.instance(SignerRepository)
        self._network = network or inject.instance(NetworkSettings)
        self._demo = demo or inject.instance(DemoSettings)

    async def whitelist(self, task_spec: TaskSpec) -> WorkflowResult:
        tx_hashes: list[str] = []
        pending = PendingTransaction()
        try:
            provider = await self._signer.get_address()
            await retry_transaction(
                lambda: self._ensure_provided(provider, task_spec, pending, tx_hashes),
                attempts=self._network.TX_RETRY_ATTEMPTS,
                backoff_sec=self._network.TX_RETRY_BACKOFF_SEC,
                label="provideTaskSpecs",
            )
            status = await self._core.is_task_spec_provided(provider, task_spec)
            if status != TASK_SPEC_OK:
                raise PostconditionFailedError(
                    f"TaskSpec is still not provided after whitelisting: {status}"
                )
        except WorkflowError as exc:
            return _failure_result(exc, tx_hashes)
        return WorkflowResult(
            outcome=WorkflowOutcome.SUCCEEDED,
            message="TaskSpec is whitelisted",
            tx_hashes=tx_hashes,
        )

    async def _ensure_provided(
        self,
        provider: str,
        task_spec: TaskSpec,
        pending: PendingTransaction,
        tx_hashes: list[str],
    ) -> None:
        if pending.pending:
            # The previous wait timed out, the transaction may still be mined.
            await pending.wait()
            return
        status = await self._core.is_task_spec_provided(provider, task_spec)
        if status == TASK_SPEC_OK:
            logger.info("TaskSpec already provided", extra={"provider": provider})
            return
        if status != TASK_SPEC_NOT_PROVIDED:
            raise PreconditionFailedError(
                PreconditionKind.TASK_SPEC_REJECTED,
                f"GelatoCore does not accept this TaskSpec: {status}",
            )

        tx = await self._core.provide_task_specs(
            [task_spec],
            TxOptions(
                gas_limit=self._demo.WHITELIST_GAS_LIMIT,
                gas_price=self._demo.tx_gas_price_wei,
            ),
        )
        tx_hashes.append(tx.tx_hash)
        pending.track(tx)
        await pending.wait()
        logger.info("provideTaskSpecs mined", extra={"tx_hash": tx.tx_hash})


class TaskSubmissionService:
    """
    Submits the Kyber trade task cycle through the user's GelatoUserProxy.

    Each step reads on-chain state into the submission context and raises a
    WorkflowError when the run cannot continue, so later steps never run
    after a failed gate.
    """

    def __init__(
        self,
        signer: SignerRepository | None = None,
        core: GelatoCoreRepository | None = None,
        gas_price_oracle: GasPriceOracleRepository | None = None,
        proxy_factory: UserProxyFactoryRepository | None = None,
        user_proxy: UserProxyRepository | None = None,
        erc20: Erc20Repository | None = None,
        task_data: TaskDataRepository | None = None,
        network: NetworkSettings | None = None,
        demo: DemoSettings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._signer = signer or inject.instance(SignerRepository)
        self._core = core or inject.instance(GelatoCoreRepository)
        self._gas_price_oracle = gas_price_oracle or inject.instance(GasPriceOracleRepository)
        self._proxy_factory = proxy_factory or inject.instance(UserProxyFactoryRepository)
        self._user_proxy = user_proxy or inject.instance(UserProxyRepository)
        self._erc20 = erc20 or inject.instance(Erc20Repository)
        self._task_data = task_data or inject.instance(TaskDataRepository)
        self._network = network or inject.instance(NetworkSettings)
        self._demo = demo or inject.instance(DemoSettings)
        self._clock = clock

    async def submit(self) -> WorkflowResult:
        tx_hashes: list[str] = []
        try:
            context = SubmissionContext(
                user=await self._signer.get_address(), tx_hashes=tx_hashes
            )
            await self.resolve_proxy(context)
            await self.assemble_task(context)
            await self.check_provider_liquidity(context)
            await self.check_executor(context)
            await self.check_module(context)
            await self.check_token_balance(context)
            await retry_transaction(
                lambda: self.ensure_allowance(context),
                attempts=self._network.TX_RETRY_ATTEMPTS,
                backoff_sec=self._network.TX_RETRY_BACKOFF_SEC,
                label="approve",
            )
            await self.submit_task_cycle(context)
        except WorkflowError as exc:
            return _failure_result(exc, tx_hashes)
        return WorkflowResult(
            outcome=WorkflowOutcome.SUCCEEDED,
            message=f"Task submitted, it will be executed {self._demo.TASK_CYCLES} times",
            tx_hashes=tx_hashes,
        )

    async def resolve_proxy(self, context: SubmissionContext) -> None:
        proxy = await self._proxy_factory.predict_proxy_address(
            context.user, self._demo.CREATE2_SALT
        )
        if not await self._proxy_factory.is_gelato_user_proxy(proxy):
            raise PreconditionFailedError(
                PreconditionKind.PROXY_NOT_DEPLOYED,
                f"No GelatoUserProxy deployed at {proxy}. Deploy it with CREATE2 salt "
                f"{self._demo.CREATE2_SALT} first.",
            )
        context.proxy = proxy
        logger.info("Using GelatoUserProxy", extra={"user": context.user, "proxy": proxy})

    async def assemble_task(self, context: SubmissionContext) -> None:
        context.task = await build_kyber_task(
            self._task_data,
            self._network,
            self._demo,
            user=context.user,
            proxy=context.proxy_address,
        )
        context.provider = GelatoProvider(
            addr=context.proxy_address,
            module=self._network.PROVIDER_MODULE_GELATO_USER_PROXY,
        )

    async def check_provider_liquidity(self, context: SubmissionContext) -> None:
        gas_price = await self._gas_price_oracle.current_gas_price()
        required_gas = self._demo.ESTIMATED_GAS_PER_EXECUTION * self._demo.TASK_CYCLES
        liquid = await self._core.is_provider_liquid(
            context.proxy_address, required_gas, gas_price
        )
        if not liquid:
            raise PreconditionFailedError(
                PreconditionKind.PROVIDER_ILLIQUID,
                f"Your provider needs to provide more funds to Gelato. {_PROVIDE_HINT}",
            )

    async def check_executor(self, context: SubmissionContext) -> None:
        executor = await self._core.executor_by_provider(context.proxy_address)
        expected = self._network.GELATO_DEFAULT_EXECUTOR
        if executor.lower() != expected.lower():
            raise PreconditionFailedError(
                PreconditionKind.EXECUTOR_NOT_ASSIGNED,
                f"Your provider needs to assign the default executor {expected}. "
                f"{_PROVIDE_HINT}",
            )

    async def check_module(self, context: SubmissionContext) -> None:
        module = self._network.PROVIDER_MODULE_GELATO_USER_PROXY
        if not await self._core.is_module_provided(context.proxy_address, module):
            raise PreconditionFailedError(
                PreconditionKind.MODULE_NOT_PROVIDED,
                f"Your provider still needs to add ProviderModuleGelatoUserProxy. "
                f"{_PROVIDE_HINT}",
            )

    async def check_token_balance(self, context: SubmissionContext) -> None:
        required = self._demo.total_token_amount
        balance = await self._erc20.balance_of(self._network.DAI, context.user)
        if balance < required:
            raise PreconditionFailedError(
                PreconditionKind.INSUFFICIENT_BALANCE,
                f"You need at least {self._demo.AMOUNT_PER_TRADE * self._demo.TASK_CYCLES} "
                "DAI in your user wallet.",
            )

    async def ensure_allowance(self, context: SubmissionContext) -> None:
        if context.approval.pending:
            # The previous wait timed out, the approval may still be mined.
            await context.approval.wait()
            return

        required = self._demo.total_token_amount
        allowance = await self._erc20.allowance(
            self._network.DAI, context.user, context.proxy_address
        )
        if allowance >= required:
            logger.info(
                "GelatoUserProxy already approved",
                extra={"proxy": context.proxy_address, "allowance": allowance},
            )
            return

        tx = await self._erc20.approve(
            self._network.DAI, context.proxy_address, required, TxOptions()
        )
        context.tx_hashes.append(tx.tx_hash)
        context.approval.track(tx)
        await context.approval.wait()
        logger.info(
            "GelatoUserProxy approved",
            extra={"proxy": context.proxy_address, "amount": required},
        )

    async def submit_task_cycle(self, context: SubmissionContext) -> None:
        if context.provider is None:
            raise RuntimeError("Provider has not been assembled yet")
        # An offset of 0 submits a cycle that never expires.
        expiry_date = 0
        if self._demo.EXPIRY_OFFSET_SEC:
            expiry_date = int(self._clock()) + self._demo.EXPIRY_OFFSET_SEC
        task_cycle = TaskCycle(
            provider=context.provider,
            tasks=[context.bound_task],
            expiry_date=expiry_date,
            cycles=self._demo.TASK_CYCLES,
        )
        tx = await self._user_proxy.submit_task_cycle(
            context.proxy_address,
            task_cycle,
            TxOptions(
                gas_limit=self._demo.SUBMIT_GAS_LIMIT,
                gas_price=self._demo.tx_gas_price_wei,
            ),
        )
        context.tx_hashes.append(tx.tx_hash)
        await tx.wait()
        logger.info(
            "Task cycle submitted",
            extra={
                "tx_hash": tx.tx_hash,
                "cycles": task_cycle.cycles,
                "expiry_date": task_cycle.expiry_date,
            },
        )
