from __future__ import annotations

from src.gelato_demo.domain.models import (
    Action,
    Condition,
    DataFlow,
    Operation,
    Task,
    TaskSpec,
)
from src.gelato_demo.domain.repositories import TaskDataRepository
from src.setup.demo_config import DemoSettings
from src.setup.network_config import NetworkSettings


def build_kyber_task_spec(network: NetworkSettings, gas_price_ceil: int) -> TaskSpec:
    """
    Compose the provider whitelist entry for automated Kyber trades.

    The fee handler takes the provider cut and passes the remaining sell
    amount on to the Kyber trade; the last action moves the time condition's
    reference forward. Action payloads are ignored for whitelisting.
    """
    fee_handler = Action(
        addr=network.ACTION_FEE_HANDLER,
        operation=Operation.DELEGATECALL,
        data_flow=DataFlow.OUT,
        terms_ok_check=True,
    )
    kyber_trade = Action(
        addr=network.ACTION_KYBER_TRADE,
        operation=Operation.DELEGATECALL,
        data_flow=DataFlow.IN,
        terms_ok_check=True,
    )
    update_condition_time = Action(
        addr=network.CONDITION_TIME_STATEFUL,
        operation=Operation.CALL,
    )
    return TaskSpec(
        conditions=[network.CONDITION_TIME_STATEFUL],
        actions=[fee_handler, kyber_trade, update_condition_time],
        gas_price_ceil=gas_price_ceil,
    )


async def build_kyber_task(
    task_data: TaskDataRepository,
    network: NetworkSettings,
    demo: DemoSettings,
    *,
    user: str,
    proxy: str,
) -> Task:
    """Bind the Kyber trade task to ``user`` and their proxy with live contract data."""
    every_interval = Condition(
        inst=network.CONDITION_TIME_STATEFUL,
        data=await task_data.get_condition_data(network.CONDITION_TIME_STATEFUL, proxy),
    )
    trade_on_kyber = Action(
        addr=network.ACTION_KYBER_TRADE,
        data=await task_data.get_kyber_trade_data(
            network.ACTION_KYBER_TRADE,
            origin=user,
            send_token=network.DAI,
            send_amount=demo.amount_per_trade_units,
            receive_token=network.KNC,
            receiver=user,
        ),
        operation=Operation.DELEGATECALL,
        data_flow=DataFlow.NONE,
        terms_ok_check=True,
    )
    update_condition_time = Action(
        addr=network.CONDITION_TIME_STATEFUL,
        data=task_data.encode_set_ref_time(
            network.CONDITION_TIME_STATEFUL, demo.TRADE_INTERVAL_SEC, 0
        ),
        operation=Operation.CALL,
    )
    return Task(
        conditions=[every_interval],
        actions=[trade_on_kyber, update_condition_time],
        self_provider_gas_limit=demo.ESTIMATED_GAS_PER_EXECUTION,
        self_provider_gas_price_ceil=demo.SELF_PROVIDER_GAS_PRICE_CEIL,
    )
