from pydantic import BaseModel, ConfigDict, Field

from src.gelato_demo.domain.models.types import Address


class GelatoProvider(BaseModel):
    model_config = ConfigDict(frozen=True)

    addr: Address = Field(
        description="Who funds execution; the user proxy itself when self-providing."
    )
    module: Address = Field(description="Provider module that governs dispatch.")
