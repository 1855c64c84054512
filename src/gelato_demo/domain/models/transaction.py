from pydantic import BaseModel, Field


class TxOptions(BaseModel):
    gas_limit: int | None = Field(default=None, gt=0, description="Explicit gas limit.")
    gas_price: int | None = Field(default=None, gt=0, description="Explicit gas price in wei.")


class TxReceipt(BaseModel):
    tx_hash: str = Field(description="Transaction hash, 0x-prefixed.")
    block_number: int = Field(description="Block that included the transaction.")
    status: int = Field(description="1 on success, 0 when reverted.")
    gas_used: int = Field(default=0, description="Gas consumed by the transaction.")

    @property
    def succeeded(self) -> bool:
        return self.status == 1
