import pytest
from pydantic import ValidationError

from src.gelato_demo.application.task_builders import build_kyber_task_spec
from src.gelato_demo.domain.models import (
    HASH_ZERO,
    Action,
    Condition,
    DataFlow,
    GelatoProvider,
    Operation,
    Task,
    TaskCycle,
    TaskSpec,
)
from tests.conftest import ACTION_KYBER_TRADE, CONDITION_TIME_STATEFUL, PROVIDER_MODULE, PROXY

MIXED_CASE = "0x52908400098527886E0F7030069857D2E4169EE7"


def test_action_defaults_to_plain_call_with_zero_payload() -> None:
    action = Action(addr=ACTION_KYBER_TRADE)

    assert action.data == HASH_ZERO
    assert action.operation is Operation.CALL
    assert action.data_flow is DataFlow.NONE
    assert action.value == 0
    assert action.terms_ok_check is False


def test_addresses_are_checksummed() -> None:
    condition = Condition(inst=MIXED_CASE.lower())

    assert condition.inst == MIXED_CASE


def test_invalid_address_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Condition(inst="0x1234")


def test_hex_string_data_is_decoded() -> None:
    condition = Condition(inst=CONDITION_TIME_STATEFUL, data="0x00ff")

    assert condition.data == b"\x00\xff"


def test_delegatecall_with_value_is_rejected() -> None:
    with pytest.raises(ValidationError, match="cannot carry value"):
        Action(addr=ACTION_KYBER_TRADE, operation=Operation.DELEGATECALL, value=1)


def test_data_in_without_producer_is_rejected() -> None:
    consumer = Action(addr=ACTION_KYBER_TRADE, data_flow=DataFlow.IN)

    with pytest.raises(ValidationError, match="expects data in"):
        Task(actions=[consumer])


def test_data_in_after_non_producer_is_rejected() -> None:
    plain = Action(addr=CONDITION_TIME_STATEFUL)
    consumer = Action(addr=ACTION_KYBER_TRADE, data_flow=DataFlow.IN)

    with pytest.raises(ValidationError):
        TaskSpec(actions=[plain, consumer], gas_price_ceil=0)


def test_data_in_after_in_and_out_is_accepted() -> None:
    relay = Action(addr=CONDITION_TIME_STATEFUL, data_flow=DataFlow.IN_AND_OUT)
    producer = Action(addr=CONDITION_TIME_STATEFUL, data_flow=DataFlow.OUT)
    consumer = Action(addr=ACTION_KYBER_TRADE, data_flow=DataFlow.IN)

    task = Task(actions=[producer, relay, consumer])

    assert [a.data_flow for a in task.actions] == [DataFlow.OUT, DataFlow.IN_AND_OUT, DataFlow.IN]


def test_task_needs_at_least_one_action() -> None:
    with pytest.raises(ValidationError):
        Task(actions=[])


def test_kyber_task_spec_chains_fee_handler_into_trade(network_settings) -> None:
    spec = build_kyber_task_spec(network_settings, gas_price_ceil=50 * 10**9)

    assert spec.conditions == [CONDITION_TIME_STATEFUL]
    assert [a.data_flow for a in spec.actions] == [DataFlow.OUT, DataFlow.IN, DataFlow.NONE]
    assert [a.operation for a in spec.actions] == [
        Operation.DELEGATECALL,
        Operation.DELEGATECALL,
        Operation.CALL,
    ]
    assert all(a.data == HASH_ZERO for a in spec.actions)
    assert spec.gas_price_ceil == 50 * 10**9


def test_task_cycle_needs_a_positive_cycle_count() -> None:
    provider = GelatoProvider(addr=PROXY, module=PROVIDER_MODULE)
    task = Task(actions=[Action(addr=ACTION_KYBER_TRADE)])

    with pytest.raises(ValidationError):
        TaskCycle(provider=provider, tasks=[task], cycles=0)


def test_task_cycle_expiry_zero_means_never() -> None:
    provider = GelatoProvider(addr=PROXY, module=PROVIDER_MODULE)
    task = Task(actions=[Action(addr=ACTION_KYBER_TRADE)])

    assert not TaskCycle(provider=provider, tasks=[task], cycles=3).expires
    assert TaskCycle(provider=provider, tasks=[task], cycles=3, expiry_date=1_700_000_900).expires
