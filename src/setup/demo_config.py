from decimal import Decimal

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

GWEI = 10**9


class DemoSettings(BaseSettings):
    """Parameters of the Gelato-Kyber task the demo whitelists and submits."""
    CREATE2_SALT: int = 42069
    TOKEN_DECIMALS: int = 18
    AMOUNT_PER_TRADE: Decimal = Decimal("1")
    TASK_CYCLES: int = 3
    EXPIRY_OFFSET_SEC: int = 900
    TRADE_INTERVAL_SEC: int = 120
    ESTIMATED_GAS_PER_EXECUTION: int = 500_000
    SELF_PROVIDER_GAS_PRICE_CEIL: int = 0
    TASK_SPEC_GAS_PRICE_CEIL_GWEI: int = 50
    WHITELIST_GAS_LIMIT: int = 6_000_000
    SUBMIT_GAS_LIMIT: int = 1_000_000
    TX_GAS_PRICE_GWEI: int = 10

    model_config = ConfigDict(env_file=".env", extra="ignore")

    @property
    def tx_gas_price_wei(self) -> int:
        return self.TX_GAS_PRICE_GWEI * GWEI

    @property
    def task_spec_gas_price_ceil_wei(self) -> int:
        return self.TASK_SPEC_GAS_PRICE_CEIL_GWEI * GWEI

    @property
    def amount_per_trade_units(self) -> int:
        return int(self.AMOUNT_PER_TRADE * (10 ** self.TOKEN_DECIMALS))

    @property
    def total_token_amount(self) -> int:
        return self.amount_per_trade_units * self.TASK_CYCLES


def get_demo_settings() -> DemoSettings:
    """Return a fresh demo settings instance."""
    return DemoSettings()
