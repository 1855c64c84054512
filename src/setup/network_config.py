from pydantic import ConfigDict, SecretStr
from pydantic_settings import BaseSettings


class NetworkSettings(BaseSettings):
    """RPC endpoint, wallets and the deployed Gelato contracts to talk to."""
    RPC_URL: str
    PROVIDER_PRIVATE_KEY: SecretStr | None = None
    USER_PRIVATE_KEY: SecretStr | None = None

    GELATO_CORE: str
    GELATO_USER_PROXY_FACTORY: str
    CONDITION_TIME_STATEFUL: str
    ACTION_FEE_HANDLER: str
    ACTION_KYBER_TRADE: str
    PROVIDER_MODULE_GELATO_USER_PROXY: str

    DAI: str
    KNC: str
    GELATO_DEFAULT_EXECUTOR: str

    CONFIRMATION_TIMEOUT_SEC: float = 600.0
    RECEIPT_POLL_LATENCY_SEC: float = 2.0
    TX_RETRY_ATTEMPTS: int = 3
    TX_RETRY_BACKOFF_SEC: float = 5.0
    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(env_file=".env", extra="ignore")


def get_network_settings() -> NetworkSettings:
    return NetworkSettings()  # type: ignore[call-arg]
