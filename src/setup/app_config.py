from __future__ import annotations

from enum import Enum

import inject

from src.gelato_demo.domain.exceptions import ConfigurationError
from src.gelato_demo.domain.repositories import (
    Erc20Repository,
    GasPriceOracleRepository,
    GelatoCoreRepository,
    SignerRepository,
    TaskDataRepository,
    UserProxyFactoryRepository,
    UserProxyRepository,
)
from src.gelato_demo.infrastructure.evm.client import Web3Client
from src.gelato_demo.infrastructure.evm.repositories import (
    Web3Erc20Repository,
    Web3GasPriceOracleRepository,
    Web3GelatoCoreRepository,
    Web3TaskDataRepository,
    Web3UserProxyFactoryRepository,
    Web3UserProxyRepository,
)
from src.setup.demo_config import DemoSettings, get_demo_settings
from src.setup.network_config import NetworkSettings, get_network_settings


class Wallet(str, Enum):
    PROVIDER = "provider"
    USER = "user"


def _private_key(settings: NetworkSettings, wallet: Wallet) -> str:
    secret = (
        settings.PROVIDER_PRIVATE_KEY if wallet is Wallet.PROVIDER else settings.USER_PRIVATE_KEY
    )
    if secret is None:
        raise ConfigurationError(f"{wallet.value.upper()}_PRIVATE_KEY is not configured")
    return secret.get_secret_value()


def configure_di(
    wallet: Wallet,
    network: NetworkSettings | None = None,
    demo: DemoSettings | None = None,
) -> None:
    """Bind settings and web3 repositories signing with ``wallet``."""
    if network is None:
        network = get_network_settings()
    if demo is None:
        demo = get_demo_settings()
    client = Web3Client.connect(
        network.RPC_URL,
        _private_key(network, wallet),
        confirmation_timeout=network.CONFIRMATION_TIMEOUT_SEC,
        poll_latency=network.RECEIPT_POLL_LATENCY_SEC,
    )
    core = Web3GelatoCoreRepository(client, network.GELATO_CORE)

    def _config(binder: inject.Binder) -> None:
        binder.bind(NetworkSettings, network)
        binder.bind(DemoSettings, demo)
        binder.bind(Web3Client, client)
        binder.bind(SignerRepository, client)
        binder.bind(GelatoCoreRepository, core)
        binder.bind(GasPriceOracleRepository, Web3GasPriceOracleRepository(client, core))
        binder.bind(
            UserProxyFactoryRepository,
            Web3UserProxyFactoryRepository(client, network.GELATO_USER_PROXY_FACTORY),
        )
        binder.bind(UserProxyRepository, Web3UserProxyRepository(client))
        binder.bind(Erc20Repository, Web3Erc20Repository(client))
        binder.bind(TaskDataRepository, Web3TaskDataRepository(client))

    inject.clear_and_configure(_config)
