from pydantic import BaseModel, ConfigDict, Field

from src.gelato_demo.domain.models.types import HASH_ZERO, Address, HexData


class Condition(BaseModel):
    model_config = ConfigDict(frozen=True)

    inst: Address = Field(description="Address of the deployed condition contract.")
    data: HexData = Field(
        default=HASH_ZERO, description="Encoded parameters for the condition check."
    )
