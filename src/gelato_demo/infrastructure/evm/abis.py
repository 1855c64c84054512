"""Minimal ABI fragments for the Gelato v1 and ERC20 calls the demo makes."""
from __future__ import annotations

from typing import Any

ABI = list[dict[str, Any]]


def _param(name: str, type_: str, components: list[dict] | None = None) -> dict[str, Any]:
    param: dict[str, Any] = {"name": name, "type": type_}
    if components is not None:
        param["components"] = components
    return param


def _function(
    name: str,
    inputs: list[dict],
    outputs: list[dict] | None = None,
    mutability: str = "view",
) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": inputs,
        "outputs": outputs or [],
        "stateMutability": mutability,
    }


CONDITION_COMPONENTS = [_param("inst", "address"), _param("data", "bytes")]

ACTION_COMPONENTS = [
    _param("addr", "address"),
    _param("data", "bytes"),
    _param("operation", "uint8"),
    _param("dataFlow", "uint8"),
    _param("value", "uint256"),
    _param("termsOkCheck", "bool"),
]

TASK_COMPONENTS = [
    _param("conditions", "tuple[]", CONDITION_COMPONENTS),
    _param("actions", "tuple[]", ACTION_COMPONENTS),
    _param("selfProviderGasLimit", "uint256"),
    _param("selfProviderGasPriceCeil", "uint256"),
]

TASK_SPEC_COMPONENTS = [
    _param("conditions", "address[]"),
    _param("actions", "tuple[]", ACTION_COMPONENTS),
    _param("gasPriceCeil", "uint256"),
]

PROVIDER_COMPONENTS = [_param("addr", "address"), _param("module", "address")]

GELATO_CORE_ABI: ABI = [
    _function(
        "isTaskSpecProvided",
        [_param("_provider", "address"), _param("_taskSpec", "tuple", TASK_SPEC_COMPONENTS)],
        [_param("", "string")],
    ),
    _function(
        "provideTaskSpecs",
        [_param("_taskSpecs", "tuple[]", TASK_SPEC_COMPONENTS)],
        mutability="nonpayable",
    ),
    _function(
        "isProviderLiquid",
        [
            _param("_provider", "address"),
            _param("_gasLimit", "uint256"),
            _param("_gelatoGasPrice", "uint256"),
        ],
        [_param("", "bool")],
    ),
    _function(
        "executorByProvider",
        [_param("_provider", "address")],
        [_param("", "address")],
    ),
    _function(
        "isModuleProvided",
        [_param("_provider", "address"), _param("_module", "address")],
        [_param("", "bool")],
    ),
    _function("gelatoGasPriceOracle", [], [_param("", "address")]),
]

GAS_PRICE_ORACLE_ABI: ABI = [_function("latestAnswer", [], [_param("", "int256")])]

GELATO_USER_PROXY_FACTORY_ABI: ABI = [
    _function(
        "predictProxyAddress",
        [_param("_user", "address"), _param("_saltNonce", "uint256")],
        [_param("", "address")],
    ),
    _function(
        "isGelatoUserProxy",
        [_param("_proxy", "address")],
        [_param("", "bool")],
    ),
]

GELATO_USER_PROXY_ABI: ABI = [
    _function(
        "submitTaskCycle",
        [
            _param("_provider", "tuple", PROVIDER_COMPONENTS),
            _param("_tasks", "tuple[]", TASK_COMPONENTS),
            _param("_expiryDate", "uint256"),
            _param("_cycles", "uint256"),
        ],
        mutability="nonpayable",
    ),
]

CONDITION_TIME_STATEFUL_ABI: ABI = [
    _function(
        "getConditionData",
        [_param("_userProxy", "address")],
        [_param("", "bytes")],
    ),
    _function(
        "setRefTime",
        [_param("_timeDelta", "uint256"), _param("", "uint256")],
        mutability="nonpayable",
    ),
]

ACTION_KYBER_TRADE_ABI: ABI = [
    _function(
        "getActionData",
        [
            _param("_origin", "address"),
            _param("_sendToken", "address"),
            _param("_sendAmount", "uint256"),
            _param("_receiveToken", "address"),
            _param("_receiver", "address"),
        ],
        [_param("", "bytes")],
        mutability="pure",
    ),
]

ERC20_ABI: ABI = [
    _function("balanceOf", [_param("_owner", "address")], [_param("", "uint256")]),
    _function(
        "allowance",
        [_param("_owner", "address"), _param("_spender", "address")],
        [_param("", "uint256")],
    ),
    _function(
        "approve",
        [_param("_spender", "address"), _param("_value", "uint256")],
        [_param("", "bool")],
        mutability="nonpayable",
    ),
]
